from enum import Enum

class RideStatus(str, Enum):
    """Статусы поездки (значения совпадают с хранимыми в БД)."""
    REQUESTED = "Requested"
    ACCEPTED = "Accepted"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"

    def __str__(self) -> str:
        return self.value

class UserType(str, Enum):
    """Тип пользователя (он же роль подписчика WebSocket)."""
    PASSENGER = "passenger"
    DRIVER = "driver"

    def __str__(self) -> str:
        return self.value

class AvailabilityStatus(str, Enum):
    """Доступность водителя."""
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"

    def __str__(self) -> str:
        return self.value

class RideEventType(str, Enum):
    """Типы push-событий о поездке."""
    NEW_RIDE_REQUEST = "new_ride_request"
    RIDE_ACCEPTED = "ride_accepted"
    RIDE_STARTED = "ride_started"
    RIDE_COMPLETED = "ride_completed"
    RIDE_CANCELLED = "ride_cancelled"
    RIDE_UPDATED = "ride_updated"

    def __str__(self) -> str:
        return self.value
