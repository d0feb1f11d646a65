from fastapi import Request
from src.services.ride_service.repository import RideRepository
from src.services.ride_service.service import RideService
from src.services.realtime_ws.broadcaster import RideBroadcaster
from src.infra.database import get_db
from src.config import settings

def get_ride_repository(request: Request) -> RideRepository:
    return RideRepository(get_db())

def get_ride_service(request: Request) -> RideService:
    repository = get_ride_repository(request)
    broadcaster = RideBroadcaster(request.app.state.connection_manager)
    return RideService(repository, broadcaster, strict_transitions=settings.rides.RIDE_STRICT_TRANSITIONS)
