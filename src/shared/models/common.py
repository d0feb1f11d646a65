# src/shared/models/common.py
"""
Общие модели для всех сервисов.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Базовая модель с camelCase-алиасами.

    Клиенты (веб-фронтенд) работают с camelCase, внутри — snake_case.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    def to_wire(self) -> dict[str, Any]:
        """JSON-совместимый словарь с camelCase ключами."""
        return self.model_dump(mode="json", by_alias=True)


class ErrorResponse(BaseModel):
    """Стандартный ответ с ошибкой."""

    error: str
    error_code: str
    details: dict[str, Any] | None = None


class HealthStatus(BaseModel):
    """Статус здоровья сервиса."""

    service: str
    status: str = "healthy"  # healthy, degraded, unhealthy
    version: str | None = None
    dependencies: dict[str, str] = Field(default_factory=dict)
