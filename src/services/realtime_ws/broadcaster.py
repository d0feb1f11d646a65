# src/services/realtime_ws/broadcaster.py
"""
Рассылка событий поездки подписчикам.

Доставка best-effort, at-most-once: без очереди, ретраев и подтверждений.
Ошибка отправки в один канал не прерывает рассылку остальным.
"""

from __future__ import annotations

from src.common.logger import log_debug, log_warning
from src.services.realtime_ws.connection_manager import ConnectionInfo, ConnectionManager
from src.shared.events.ride_events import RideEventMessage
from src.shared.models.enums import RideEventType, UserType
from src.shared.models.ride_dto import RideDTO


class RideBroadcaster:
    """Строит RideEventMessage и отправляет одному подписчику или всем."""

    def __init__(self, manager: ConnectionManager) -> None:
        self.manager = manager

    async def broadcast(
        self,
        event_type: RideEventType,
        ride: RideDTO,
        target_subscriber_id: str | int | None = None,
        cancelled_by: UserType | None = None,
    ) -> int:
        """
        Отправить событие.

        Args:
            event_type: Тип события
            ride: Снимок поездки
            target_subscriber_id: Получатель; None — все подключённые
            cancelled_by: Кто отменил (только для ride_cancelled)

        Returns:
            Количество каналов, в которые сообщение записано
        """
        message = RideEventMessage(type=event_type, ride=ride, cancelled_by=cancelled_by)
        payload = message.to_wire()

        if target_subscriber_id is None:
            targets = self.manager.all()
        else:
            conn = self.manager.lookup(str(target_subscriber_id))
            if conn is None:
                await log_debug(f"{event_type}: подписчик {target_subscriber_id} не подключён, событие отброшено")
                return 0
            targets = [conn]

        sent_count = 0
        failed: list[ConnectionInfo] = []

        for conn in targets:
            if not conn.is_open:
                continue
            try:
                await conn.websocket.send_json(payload)
                sent_count += 1
            except Exception as e:
                await log_warning(f"{event_type}: не удалось отправить подписчику {conn.subscriber_id}: {e}")
                failed.append(conn)

        # Разорванные каналы убираем из реестра
        for conn in failed:
            await self.manager.unsubscribe(conn.websocket)

        self.manager.record_sent(sent_count)
        return sent_count
