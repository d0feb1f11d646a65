# src/shared/events/__init__.py
"""
Схемы сообщений realtime-канала.

Все сообщения валидируются на границе (pydantic) до диспетчеризации.
"""

from src.shared.events.base import MalformedMessageError, RealtimeMessage
from src.shared.events.ride_events import (
    RideEventMessage,
    SubscribeMessage,
    SubscribedMessage,
    parse_client_message,
)

__all__ = [
    "MalformedMessageError",
    "RealtimeMessage",
    "RideEventMessage",
    "SubscribeMessage",
    "SubscribedMessage",
    "parse_client_message",
]
