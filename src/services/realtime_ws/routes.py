# src/services/realtime_ws/routes.py
"""
WebSocket endpoint для live-обновлений поездок.

Входящие сообщения:
- {"type": "subscribe", "userId": "7", "userType": "passenger" | "driver"}

Отдельного сообщения отписки нет — отписка происходит при закрытии соединения.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request, WebSocket, WebSocketDisconnect
from pydantic import BaseModel

from src.common.logger import log_debug, log_error, log_info, log_warning
from src.services.realtime_ws.connection_manager import ConnectionManager
from src.shared.events.base import MalformedMessageError
from src.shared.events.ride_events import SubscribeMessage, SubscribedMessage, parse_client_message

router = APIRouter(tags=["Realtime"])


class StatsResponse(BaseModel):
    """Статистика соединений."""
    active_connections: int
    total_subscriptions_ever: int
    total_messages_sent: int
    connections_by_type: dict[str, int]


def get_connection_manager(request: Request) -> ConnectionManager:
    """Реестр соединений, принадлежащий приложению."""
    return request.app.state.connection_manager


@router.get("/stats", response_model=StatsResponse, tags=["Stats"])
async def get_stats(manager: ConnectionManager = Depends(get_connection_manager)) -> StatsResponse:
    """Статистика реестра соединений."""
    return StatsResponse(**manager.get_stats())


@router.websocket("/ws")
@router.websocket("/")
async def ride_updates(websocket: WebSocket) -> None:
    """Соединение подписчика: принимает subscribe, дальше только получает push-события."""
    manager: ConnectionManager = websocket.app.state.connection_manager

    await websocket.accept()
    await log_debug("Новое WebSocket соединение")

    try:
        while True:
            frame = await websocket.receive()
            if frame["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(frame.get("code", 1000))

            raw = frame.get("text")
            if raw is None:
                raw = frame.get("bytes") or b""
            await _handle_client_message(manager, websocket, raw)

    except WebSocketDisconnect:
        pass
    except Exception as e:
        await log_error(f"Ошибка WebSocket соединения: {e}", exc_info=True)
    finally:
        for subscriber_id in await manager.unsubscribe(websocket):
            await log_info(f"Пользователь {subscriber_id} отключился")


async def _handle_client_message(
    manager: ConnectionManager,
    websocket: WebSocket,
    raw: str | bytes | dict[str, Any],
) -> None:
    """Обработать сообщение от клиента. Некорректные сообщения отбрасываются, соединение остаётся."""
    try:
        message = parse_client_message(raw)
    except MalformedMessageError as e:
        await log_warning(f"Отброшено некорректное сообщение клиента: {e}")
        return

    if isinstance(message, SubscribeMessage):
        await manager.subscribe(message.user_id, message.user_type, websocket)
        await log_info(f"Пользователь {message.user_id} ({message.user_type}) подписался на обновления")
        await websocket.send_json(SubscribedMessage(user_id=message.user_id).to_wire())
