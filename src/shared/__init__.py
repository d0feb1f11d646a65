# src/shared/__init__.py
"""
Общий код между сервисами.

Модули:
- events: схемы сообщений WebSocket-канала
- models: общие DTO и Pydantic-модели
- exceptions: таксономия ошибок сервисов
"""

__all__: list[str] = []
