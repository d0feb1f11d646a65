# src/shared/events/base.py
"""
Базовые классы для realtime-сообщений.
"""

from __future__ import annotations

import json
from typing import Any

from src.shared.models.common import CamelModel


class MalformedMessageError(ValueError):
    """Входящее сообщение не удалось разобрать или провалидировать."""


class RealtimeMessage(CamelModel):
    """
    Базовый класс для всех сообщений WebSocket-канала.

    Все сообщения:
    - Сериализуются в JSON с camelCase ключами
    - Содержат дискриминатор `type`
    """

    def to_json(self) -> str:
        """Сериализует сообщение в JSON."""
        return json.dumps(self.to_wire(), ensure_ascii=False)


def decode_payload(raw: str | bytes | dict[str, Any]) -> dict[str, Any]:
    """Превращает сырой кадр в словарь или бросает MalformedMessageError."""
    if isinstance(raw, dict):
        return raw

    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as e:
        raise MalformedMessageError(f"Невалидный JSON: {e}") from e

    if not isinstance(data, dict):
        raise MalformedMessageError("Сообщение должно быть JSON-объектом")
    return data
