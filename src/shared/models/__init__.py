"""
Общие DTO и Pydantic-модели.
"""

from src.shared.models.enums import (
    RideStatus,
    UserType,
    AvailabilityStatus,
    RideEventType,
)
from src.shared.models.user_dto import UserDTO, DriverDTO
from src.shared.models.ride_dto import RideDTO
from src.shared.models.common import CamelModel, ErrorResponse, HealthStatus

__all__ = [
    # Enums
    "RideStatus",
    "UserType",
    "AvailabilityStatus",
    "RideEventType",
    # DTO
    "UserDTO",
    "DriverDTO",
    "RideDTO",
    # Common
    "CamelModel",
    "ErrorResponse",
    "HealthStatus",
]
