#!/usr/bin/env python3
# main.py
"""
Главная точка входа Ride Hailing backend.
Запускает HTTP + WebSocket сервер; схема БД применяется при старте приложения.
"""

from __future__ import annotations

import asyncio
import sys

from src.config import settings
from src.common.logger import log_info, setup_logging
from src.common.constants import TypeMsg


async def run_api() -> None:
    """Запускает API (HTTP операции и WebSocket канал /ws)."""
    import uvicorn

    await log_info(
        f"Запуск Ride Hailing API на порту {settings.deployment.API_PORT}...",
        type_msg=TypeMsg.INFO,
    )

    config = uvicorn.Config(
        "src.services.api.app:app",
        host=settings.deployment.API_HOST,
        port=settings.deployment.API_PORT,
        reload=settings.system.DEBUG,
        log_level="debug" if settings.system.DEBUG else "info",
    )

    server = uvicorn.Server(config)
    try:
        await server.serve()
    except asyncio.CancelledError:
        await log_info("API: graceful shutdown", type_msg=TypeMsg.DEBUG)
        await server.shutdown()


def print_usage() -> None:
    """Выводит справку по использованию."""
    print(f"""
{settings.system.PROJECT_NAME} v{settings.system.VERSION}

Использование:
    python main.py [api]

Режимы:
    api    — HTTP API + WebSocket (по умолчанию)

Переменные окружения:
    PORT                       — порт сервера (перекрывает API_PORT)
    DB_PASSWORD                — пароль PostgreSQL
    SUPABASE_SERVICE_ROLE_KEY  — ключ администратора провайдера учётных записей
    SUPABASE_ANON_KEY          — публичный ключ для входа по паролю
    """)


if __name__ == "__main__":
    if len(sys.argv) > 1:
        arg = sys.argv[1].lower()
        if arg in ("--help", "-h"):
            print_usage()
            sys.exit(0)
        elif arg != "api":
            print(f"Ошибка: неизвестный режим '{arg}'")
            print_usage()
            sys.exit(1)

    setup_logging()
    try:
        asyncio.run(run_api())
    except KeyboardInterrupt:
        pass
