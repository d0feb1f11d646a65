from typing import Optional, List
from src.services.ride_service.repository import RideRepository
from src.services.ride_service.state_machine import RideStateMachine
from src.services.realtime_ws.broadcaster import RideBroadcaster
from src.infra.database import store_operation
from src.shared.exceptions import ClientInputError, InvalidTransitionError, StoreError
from src.shared.models.ride_dto import RideDTO, RequestRideRequest, UpdateRideRequest
from src.shared.models.enums import RideStatus, RideEventType, UserType
from src.common.logger import log_info, log_error

# Колонки, которые не могут стать NULL при частичном обновлении
NON_NULLABLE_FIELDS = ("pickup_location", "drop_location", "ride_type", "status")

class RideService:
    """
    Жизненный цикл поездки.

    Каждая операция: валидация входа -> одна запись в хранилище -> рассылка события.
    Событие уходит только после успешной записи; сбой рассылки не влияет на результат.
    """

    def __init__(self, repository: RideRepository, broadcaster: RideBroadcaster, strict_transitions: bool = False):
        self.repository = repository
        self.broadcaster = broadcaster
        self.strict_transitions = strict_transitions

    async def request_ride(self, request: RequestRideRequest) -> RideDTO:
        if not (request.pickup_location and request.drop_location and request.ride_type and request.passenger_id):
            raise ClientInputError("Missing required fields")

        async with store_operation("создание поездки"):
            ride = await self.repository.create_ride(
                pickup_location=request.pickup_location,
                drop_location=request.drop_location,
                ride_type=request.ride_type,
                passenger_id=request.passenger_id,
            )
        await log_info(f"Поездка {ride.id} запрошена пассажиром {ride.passenger_id}")

        # Новый запрос видят все подключённые (водители фильтруют на клиенте)
        await self._broadcast(RideEventType.NEW_RIDE_REQUEST, ride)
        return ride

    async def accept_ride(self, ride_id: int, driver_id: Optional[int]) -> RideDTO:
        if driver_id is None:
            raise ClientInputError("Missing required fields: driverId")

        ride = await self._transition(ride_id, RideStatus.ACCEPTED, driver_id=driver_id)
        await log_info(f"Поездка {ride_id} принята водителем {driver_id}")

        await self._broadcast(RideEventType.RIDE_ACCEPTED, ride, ride.passenger_id)
        return ride

    async def start_ride(self, ride_id: int) -> RideDTO:
        ride = await self._transition(ride_id, RideStatus.IN_PROGRESS)
        await log_info(f"Поездка {ride_id} началась")

        await self._notify_participants(RideEventType.RIDE_STARTED, ride)
        return ride

    async def complete_ride(self, ride_id: int) -> RideDTO:
        ride = await self._transition(ride_id, RideStatus.COMPLETED)
        await log_info(f"Поездка {ride_id} завершена")

        await self._notify_participants(RideEventType.RIDE_COMPLETED, ride)
        return ride

    async def cancel_ride(self, ride_id: int, cancelled_by: Optional[str]) -> RideDTO:
        try:
            canceller = UserType(cancelled_by)
        except ValueError:
            raise ClientInputError("cancelledBy must be 'passenger' or 'driver'")

        ride = await self._transition(ride_id, RideStatus.CANCELLED)
        await log_info(f"Поездка {ride_id} отменена ({canceller})")

        # Уведомляем только другую сторону
        if canceller == UserType.PASSENGER and ride.driver_id is not None:
            await self._broadcast(RideEventType.RIDE_CANCELLED, ride, ride.driver_id, cancelled_by=canceller)
        elif canceller == UserType.DRIVER:
            await self._broadcast(RideEventType.RIDE_CANCELLED, ride, ride.passenger_id, cancelled_by=canceller)
        return ride

    async def update_ride(self, ride_id: int, request: UpdateRideRequest) -> RideDTO:
        fields = request.model_dump(exclude_unset=True)
        if not fields:
            raise ClientInputError("No fields to update")

        nulled = [name for name in NON_NULLABLE_FIELDS if name in fields and fields[name] is None]
        if nulled:
            raise ClientInputError(f"Fields cannot be null: {', '.join(nulled)}")

        if "status" in fields:
            fields["status"] = RideStatus(fields["status"]).value

        async with store_operation("обновление поездки"):
            ride = await self.repository.update_ride(ride_id, fields)
        if ride is None:
            raise StoreError(f"Ride {ride_id} not found")
        await log_info(f"Поездка {ride_id} обновлена: {sorted(fields)}")

        await self._notify_participants(RideEventType.RIDE_UPDATED, ride)
        return ride

    async def get_passenger_rides(self, passenger_id: int) -> List[RideDTO]:
        async with store_operation("поездки пассажира"):
            return await self.repository.get_rides_by_passenger(passenger_id)

    async def get_driver_rides(self, driver_id: int) -> List[RideDTO]:
        async with store_operation("поездки водителя"):
            return await self.repository.get_rides_by_driver(driver_id)

    async def _transition(self, ride_id: int, new_status: RideStatus, driver_id: Optional[int] = None) -> RideDTO:
        """Переводит поездку в new_status одной атомарной записью."""
        fields = {"status": new_status.value}
        if driver_id is not None:
            fields["driver_id"] = driver_id

        # В строгом режиме статус проверяется в том же UPDATE
        expected = RideStateMachine.allowed_sources(new_status) if self.strict_transitions else None

        async with store_operation(f"переход в {new_status}"):
            ride = await self.repository.update_ride(ride_id, fields, expected_statuses=expected)
            if ride is None and expected is not None:
                current = await self.repository.get_ride(ride_id)
                if current is not None:
                    raise InvalidTransitionError(f"Invalid transition from {current.status} to {new_status}")

        if ride is None:
            raise StoreError(f"Ride {ride_id} not found")
        return ride

    async def _notify_participants(self, event_type: RideEventType, ride: RideDTO) -> None:
        """Пассажиру и назначенному водителю (если есть)."""
        await self._broadcast(event_type, ride, ride.passenger_id)
        if ride.driver_id is not None:
            await self._broadcast(event_type, ride, ride.driver_id)

    async def _broadcast(
        self,
        event_type: RideEventType,
        ride: RideDTO,
        target_id: Optional[int] = None,
        cancelled_by: Optional[UserType] = None,
    ) -> None:
        try:
            await self.broadcaster.broadcast(event_type, ride, target_id, cancelled_by)
        except Exception as e:
            await log_error(f"Сбой рассылки {event_type} по поездке {ride.id}: {e}", exc_info=True)
