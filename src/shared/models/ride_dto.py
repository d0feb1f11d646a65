from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel
from src.shared.models.common import CamelModel
from src.shared.models.enums import RideStatus
from src.shared.models.user_dto import UserDTO, DriverDTO

class RideDTO(CamelModel):
    """Снимок поездки, который уходит клиентам (HTTP и WebSocket)."""
    id: int
    pickup_location: str
    drop_location: str
    ride_type: str
    status: RideStatus = RideStatus.REQUESTED
    passenger_id: int
    driver_id: Optional[int] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    passenger: Optional[UserDTO] = None
    driver: Optional[DriverDTO] = None

class RequestRideRequest(CamelModel):
    # Поля необязательные: отсутствие проверяет сервис (400, а не 422)
    pickup_location: Optional[str] = None
    drop_location: Optional[str] = None
    ride_type: Optional[str] = None
    passenger_id: Optional[int] = None

class AcceptRideRequest(CamelModel):
    driver_id: Optional[int] = None

class CancelRideRequest(CamelModel):
    cancelled_by: Optional[str] = None

class UpdateRideRequest(CamelModel):
    """Частичное обновление поездки: учитываются только переданные поля."""
    pickup_location: Optional[str] = None
    drop_location: Optional[str] = None
    ride_type: Optional[str] = None
    status: Optional[RideStatus] = None
    driver_id: Optional[int] = None

class RideResponse(BaseModel):
    message: str
    ride: dict

class RideListResponse(BaseModel):
    message: str
    rides: List[dict]
