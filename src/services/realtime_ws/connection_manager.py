# src/services/realtime_ws/connection_manager.py
"""
Реестр WebSocket соединений.
Хранит одну активную запись на подписчика (userId) и отдаёт снимки для рассылки.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from fastapi import WebSocket
from starlette.websockets import WebSocketState

from src.shared.models.enums import UserType


@dataclass
class ConnectionInfo:
    """Информация о соединении подписчика."""
    subscriber_id: str
    user_type: UserType
    websocket: WebSocket
    connected_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_open(self) -> bool:
        """Канал ещё принимает сообщения."""
        return (
            self.websocket.client_state == WebSocketState.CONNECTED
            and self.websocket.application_state == WebSocketState.CONNECTED
        )


class ConnectionManager:
    """
    Реестр подписчиков realtime-канала.

    Поддерживает:
    - Подписку (последняя подписка на userId перезаписывает предыдущую)
    - Отписку по каналу (вызывается при закрытии соединения)
    - Поиск по userId и снимок всех соединений для broadcast

    Мутации сериализуются через asyncio.Lock; чтения — простые чтения словаря.
    """

    def __init__(self) -> None:
        # subscriber_id -> ConnectionInfo
        self._connections: dict[str, ConnectionInfo] = {}
        self._lock = asyncio.Lock()

        # Для статистики
        self._total_subscriptions: int = 0
        self._total_messages_sent: int = 0

    @property
    def active_connections(self) -> int:
        """Количество активных соединений."""
        return len(self._connections)

    async def subscribe(self, subscriber_id: str, user_type: UserType, websocket: WebSocket) -> None:
        """
        Зарегистрировать соединение подписчика.

        Если у подписчика уже есть соединение — оно просто забывается (не закрывается).
        """
        async with self._lock:
            self._connections[subscriber_id] = ConnectionInfo(
                subscriber_id=subscriber_id,
                user_type=user_type,
                websocket=websocket,
            )
            self._total_subscriptions += 1

    async def unsubscribe(self, websocket: WebSocket) -> list[str]:
        """
        Удалить все записи, которым принадлежит канал.

        Один канал может быть подписан под несколькими userId (смена аккаунта без переподключения).

        Returns:
            subscriber_id удалённых записей; пустой список, если канал не был зарегистрирован
        """
        async with self._lock:
            removed = [
                subscriber_id
                for subscriber_id, conn in self._connections.items()
                if conn.websocket is websocket
            ]
            for subscriber_id in removed:
                del self._connections[subscriber_id]
        return removed

    def lookup(self, subscriber_id: str) -> ConnectionInfo | None:
        """Найти соединение подписчика."""
        return self._connections.get(subscriber_id)

    def all(self) -> list[ConnectionInfo]:
        """Снимок всех соединений (изменения реестра во время обхода не видны)."""
        return list(self._connections.values())

    async def clear(self) -> None:
        """Очистить реестр (остановка процесса)."""
        async with self._lock:
            self._connections.clear()

    def record_sent(self, count: int = 1) -> None:
        self._total_messages_sent += count

    def get_stats(self) -> dict[str, Any]:
        """Получить статистику."""
        return {
            "active_connections": len(self._connections),
            "total_subscriptions_ever": self._total_subscriptions,
            "total_messages_sent": self._total_messages_sent,
            "connections_by_type": self._count_by_type(),
        }

    def _count_by_type(self) -> dict[str, int]:
        """Подсчёт соединений по типу пользователя."""
        counts: dict[str, int] = {}
        for conn in self._connections.values():
            key = conn.user_type.value
            counts[key] = counts.get(key, 0) + 1
        return counts
