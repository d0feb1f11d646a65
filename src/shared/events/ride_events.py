# src/shared/events/ride_events.py
"""
Сообщения WebSocket-канала поездок.

Входящие (клиент → сервер):
- subscribe: {"type": "subscribe", "userId": "7", "userType": "passenger"}

Исходящие (сервер → клиент):
- subscribed: подтверждение подписки
- события поездки: {"type": "ride_accepted", "ride": {...}, "cancelledBy": "driver"}
"""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import Field, ValidationError, field_validator

from src.shared.events.base import MalformedMessageError, RealtimeMessage, decode_payload
from src.shared.models.enums import RideEventType, UserType
from src.shared.models.ride_dto import RideDTO


# === ВХОДЯЩИЕ ===

class SubscribeMessage(RealtimeMessage):
    """Подписка клиента на обновления поездок."""

    type: Literal["subscribe"] = "subscribe"
    user_id: str = Field(min_length=1)
    user_type: UserType

    @field_validator("user_id", mode="before")
    @classmethod
    def coerce_user_id(cls, v: Any) -> Any:
        """Фронтенд может прислать id числом."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


CLIENT_MESSAGE_TYPES: dict[str, type[RealtimeMessage]] = {
    "subscribe": SubscribeMessage,
}


def parse_client_message(raw: str | bytes | dict[str, Any]) -> RealtimeMessage:
    """
    Разбирает входящий кадр в типизированное сообщение.

    Raises:
        MalformedMessageError: невалидный JSON, неизвестный тип или нет обязательных полей
    """
    data = decode_payload(raw)

    message_type = data.get("type")
    message_cls = CLIENT_MESSAGE_TYPES.get(message_type) if isinstance(message_type, str) else None
    if message_cls is None:
        raise MalformedMessageError(f"Неизвестный тип сообщения: {message_type!r}")

    try:
        return message_cls.model_validate(data)
    except ValidationError as e:
        raise MalformedMessageError(str(e)) from e


# === ИСХОДЯЩИЕ ===

class SubscribedMessage(RealtimeMessage):
    """Подтверждение подписки."""

    type: Literal["subscribed"] = "subscribed"
    user_id: str


class RideEventMessage(RealtimeMessage):
    """Push-событие жизненного цикла поездки."""

    type: RideEventType
    ride: RideDTO
    cancelled_by: Optional[UserType] = None

    def to_wire(self) -> dict[str, Any]:
        data = super().to_wire()
        if self.cancelled_by is None:
            data.pop("cancelledBy", None)
        return data
