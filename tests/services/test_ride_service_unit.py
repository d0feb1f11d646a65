import pytest
from unittest.mock import AsyncMock
from asyncpg import PostgresConnectionError
from src.services.ride_service.service import RideService
from src.services.realtime_ws.broadcaster import RideBroadcaster
from src.services.realtime_ws.connection_manager import ConnectionManager
from src.shared.exceptions import ClientInputError, InvalidTransitionError, StoreError
from src.shared.models.ride_dto import RequestRideRequest, UpdateRideRequest
from src.shared.models.enums import RideEventType, RideStatus, UserType

@pytest.fixture
def mock_repo(make_ride):
    repo = AsyncMock()
    repo.create_ride.return_value = make_ride()
    repo.update_ride.return_value = make_ride(status=RideStatus.ACCEPTED, driver_id=3)
    repo.get_ride.return_value = None
    repo.get_rides_by_passenger.return_value = [make_ride(), make_ride(ride_id=43)]
    repo.get_rides_by_driver.return_value = []
    return repo

def _targets(broadcaster):
    """(тип события, получатель) для каждого вызова рассылки."""
    return [(c.args[0], c.args[2]) for c in broadcaster.broadcast.call_args_list]

@pytest.mark.asyncio
async def test_request_ride_broadcasts_to_all(mock_repo, mock_broadcaster):
    service = RideService(mock_repo, mock_broadcaster)

    ride = await service.request_ride(RequestRideRequest(
        pickup_location="Main St 1", drop_location="Airport", ride_type="economy", passenger_id=7
    ))

    assert ride.id == 42
    mock_repo.create_ride.assert_called_once_with(
        pickup_location="Main St 1", drop_location="Airport", ride_type="economy", passenger_id=7
    )
    assert _targets(mock_broadcaster) == [(RideEventType.NEW_RIDE_REQUEST, None)]

@pytest.mark.asyncio
async def test_request_ride_missing_fields(mock_repo, mock_broadcaster):
    service = RideService(mock_repo, mock_broadcaster)

    with pytest.raises(ClientInputError):
        await service.request_ride(RequestRideRequest(pickup_location="Main St 1", passenger_id=7))

    mock_repo.create_ride.assert_not_called()
    mock_broadcaster.broadcast.assert_not_called()

@pytest.mark.asyncio
async def test_accept_ride_notifies_passenger_only(mock_repo, mock_broadcaster):
    service = RideService(mock_repo, mock_broadcaster)

    ride = await service.accept_ride(42, 3)

    assert ride.status == RideStatus.ACCEPTED
    assert ride.driver_id == 3
    mock_repo.update_ride.assert_called_once_with(
        42, {"status": "Accepted", "driver_id": 3}, expected_statuses=None
    )
    assert _targets(mock_broadcaster) == [(RideEventType.RIDE_ACCEPTED, 7)]

@pytest.mark.asyncio
async def test_accept_ride_without_driver(mock_repo, mock_broadcaster):
    service = RideService(mock_repo, mock_broadcaster)

    with pytest.raises(ClientInputError):
        await service.accept_ride(42, None)

    mock_repo.update_ride.assert_not_called()

@pytest.mark.asyncio
async def test_start_and_complete_notify_both_participants(mock_repo, mock_broadcaster, make_ride):
    service = RideService(mock_repo, mock_broadcaster)
    mock_repo.update_ride.return_value = make_ride(status=RideStatus.IN_PROGRESS, driver_id=3)

    await service.start_ride(42)
    mock_repo.update_ride.return_value = make_ride(status=RideStatus.COMPLETED, driver_id=3)
    await service.complete_ride(42)

    assert _targets(mock_broadcaster) == [
        (RideEventType.RIDE_STARTED, 7),
        (RideEventType.RIDE_STARTED, 3),
        (RideEventType.RIDE_COMPLETED, 7),
        (RideEventType.RIDE_COMPLETED, 3),
    ]

@pytest.mark.asyncio
async def test_start_without_driver_never_broadcasts_to_all(mock_repo, mock_broadcaster, make_ride):
    """Без назначенного водителя событие получает только пассажир."""
    service = RideService(mock_repo, mock_broadcaster)
    mock_repo.update_ride.return_value = make_ride(status=RideStatus.IN_PROGRESS)

    await service.start_ride(42)

    assert _targets(mock_broadcaster) == [(RideEventType.RIDE_STARTED, 7)]

@pytest.mark.asyncio
async def test_cancel_by_passenger_notifies_driver(mock_repo, mock_broadcaster, make_ride):
    service = RideService(mock_repo, mock_broadcaster)
    mock_repo.update_ride.return_value = make_ride(status=RideStatus.CANCELLED, driver_id=3)

    await service.cancel_ride(42, "passenger")

    call = mock_broadcaster.broadcast.call_args
    assert call.args == (RideEventType.RIDE_CANCELLED, mock_repo.update_ride.return_value, 3, UserType.PASSENGER)
    assert mock_broadcaster.broadcast.call_count == 1

@pytest.mark.asyncio
async def test_cancel_by_passenger_without_driver_is_silent(mock_repo, mock_broadcaster, make_ride):
    service = RideService(mock_repo, mock_broadcaster)
    mock_repo.update_ride.return_value = make_ride(status=RideStatus.CANCELLED)

    ride = await service.cancel_ride(42, "passenger")

    assert ride.status == RideStatus.CANCELLED
    mock_broadcaster.broadcast.assert_not_called()

@pytest.mark.asyncio
async def test_cancel_by_driver_notifies_passenger(mock_repo, mock_broadcaster, make_ride):
    service = RideService(mock_repo, mock_broadcaster)
    mock_repo.update_ride.return_value = make_ride(status=RideStatus.CANCELLED, driver_id=3)

    await service.cancel_ride(42, "driver")

    assert _targets(mock_broadcaster) == [(RideEventType.RIDE_CANCELLED, 7)]
    assert mock_broadcaster.broadcast.call_args.args[3] == UserType.DRIVER

@pytest.mark.asyncio
@pytest.mark.parametrize("cancelled_by", [None, "admin", ""])
async def test_cancel_invalid_canceller(mock_repo, mock_broadcaster, cancelled_by):
    service = RideService(mock_repo, mock_broadcaster)

    with pytest.raises(ClientInputError):
        await service.cancel_ride(42, cancelled_by)

    mock_repo.update_ride.assert_not_called()

@pytest.mark.asyncio
async def test_unknown_ride_is_store_error(mock_repo, mock_broadcaster):
    service = RideService(mock_repo, mock_broadcaster)
    mock_repo.update_ride.return_value = None

    with pytest.raises(StoreError):
        await service.start_ride(999)

    mock_broadcaster.broadcast.assert_not_called()

@pytest.mark.asyncio
async def test_store_failure_means_no_broadcast(mock_repo, mock_broadcaster):
    service = RideService(mock_repo, mock_broadcaster)
    mock_repo.update_ride.side_effect = PostgresConnectionError("connection lost")

    with pytest.raises(StoreError):
        await service.accept_ride(42, 3)

    mock_broadcaster.broadcast.assert_not_called()

@pytest.mark.asyncio
async def test_broadcast_failure_does_not_fail_operation(mock_repo, mock_broadcaster):
    service = RideService(mock_repo, mock_broadcaster)
    mock_broadcaster.broadcast.side_effect = RuntimeError("socket gone")

    ride = await service.accept_ride(42, 3)

    assert ride.driver_id == 3

@pytest.mark.asyncio
async def test_update_ride_partial(mock_repo, mock_broadcaster, make_ride):
    service = RideService(mock_repo, mock_broadcaster)
    mock_repo.update_ride.return_value = make_ride(driver_id=3)

    request = UpdateRideRequest.model_validate({"dropLocation": "Central Station", "status": "In Progress"})
    await service.update_ride(42, request)

    mock_repo.update_ride.assert_called_once_with(42, {"drop_location": "Central Station", "status": "In Progress"})
    assert _targets(mock_broadcaster) == [(RideEventType.RIDE_UPDATED, 7), (RideEventType.RIDE_UPDATED, 3)]

@pytest.mark.asyncio
async def test_update_ride_can_unassign_driver(mock_repo, mock_broadcaster, make_ride):
    service = RideService(mock_repo, mock_broadcaster)
    mock_repo.update_ride.return_value = make_ride()

    await service.update_ride(42, UpdateRideRequest.model_validate({"driverId": None}))

    mock_repo.update_ride.assert_called_once_with(42, {"driver_id": None})
    assert _targets(mock_broadcaster) == [(RideEventType.RIDE_UPDATED, 7)]

@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [{}, {"pickupLocation": None}])
async def test_update_ride_rejects_empty_or_null(mock_repo, mock_broadcaster, payload):
    service = RideService(mock_repo, mock_broadcaster)

    with pytest.raises(ClientInputError):
        await service.update_ride(42, UpdateRideRequest.model_validate(payload))

    mock_repo.update_ride.assert_not_called()

@pytest.mark.asyncio
async def test_strict_mode_rejects_invalid_transition(mock_repo, mock_broadcaster, make_ride):
    service = RideService(mock_repo, mock_broadcaster, strict_transitions=True)
    mock_repo.update_ride.return_value = None
    mock_repo.get_ride.return_value = make_ride(status=RideStatus.COMPLETED, driver_id=3)

    with pytest.raises(InvalidTransitionError):
        await service.accept_ride(42, 3)

    kwargs = mock_repo.update_ride.call_args.kwargs
    assert kwargs["expected_statuses"] == [RideStatus.REQUESTED]
    mock_broadcaster.broadcast.assert_not_called()

@pytest.mark.asyncio
async def test_strict_mode_unknown_ride(mock_repo, mock_broadcaster):
    service = RideService(mock_repo, mock_broadcaster, strict_transitions=True)
    mock_repo.update_ride.return_value = None

    with pytest.raises(StoreError):
        await service.complete_ride(999)

@pytest.mark.asyncio
async def test_get_passenger_rides(mock_repo, mock_broadcaster):
    service = RideService(mock_repo, mock_broadcaster)

    rides = await service.get_passenger_rides(7)

    assert [r.id for r in rides] == [42, 43]
    mock_repo.get_rides_by_passenger.assert_called_once_with(7)

@pytest.mark.asyncio
async def test_accept_scenario_reaches_only_passenger_7(mock_repo, make_ride, make_websocket):
    """Пассажир 7 и водитель 3 подписаны; accept доставляет ровно одно событие подписчику "7"."""
    manager = ConnectionManager()
    passenger_ws, driver_ws = make_websocket(), make_websocket()
    await manager.subscribe("7", UserType.PASSENGER, passenger_ws)
    await manager.subscribe("3", UserType.DRIVER, driver_ws)
    service = RideService(mock_repo, RideBroadcaster(manager))

    await service.request_ride(RequestRideRequest(
        pickup_location="A", drop_location="B", ride_type="economy", passenger_id=7
    ))
    passenger_ws.sent.clear()
    driver_ws.sent.clear()

    await service.accept_ride(42, 3)

    assert len(passenger_ws.sent) == 1
    assert passenger_ws.sent[0]["type"] == "ride_accepted"
    assert passenger_ws.sent[0]["ride"]["driverId"] == 3
    assert driver_ws.sent == []
