from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel
from src.shared.models.common import CamelModel
from src.shared.models.enums import UserType, AvailabilityStatus

class UserDTO(CamelModel):
    id: int
    auth_id: str
    name: Optional[str] = None
    type: UserType
    created_at: Optional[datetime] = None

class DriverDTO(CamelModel):
    id: int
    auth_id: str
    availability_status: AvailabilityStatus = AvailabilityStatus.UNAVAILABLE
    ride_type: Optional[str] = None
    created_at: Optional[datetime] = None

    user: Optional[UserDTO] = None

class RegisterUserRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    type: Optional[str] = None
    ride_type: Optional[str] = None

class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None

class AuthInfo(BaseModel):
    name: Optional[str] = None
    ride_type: Optional[str] = None
    id: int
    auth_id: str
    email: Optional[str] = None
    access_token: str
    refresh_token: str

class LoginResponse(BaseModel):
    message: str
    auth: AuthInfo
    userType: UserType
    driverInfo: Optional[dict] = None

class MessageResponse(BaseModel):
    message: str

class DriverListResponse(BaseModel):
    message: str
    drivers: List[dict]
