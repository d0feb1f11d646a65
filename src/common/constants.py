# src/common/constants.py
"""
Общие константы.
"""

from enum import Enum


class TypeMsg(str, Enum):
    """Типы сообщений для логирования."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


# Имя корневого логгера приложения
APP_LOGGER_NAME = "ride_hailing"

# Логгеры сторонних библиотек и уровни для них
THIRD_PARTY_LOG_LEVELS = {
    "asyncpg": "WARNING",
    "httpx": "WARNING",
    "uvicorn.access": "WARNING",
}
