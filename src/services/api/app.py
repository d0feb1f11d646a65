# src/services/api/app.py
"""
FastAPI приложение ride-hailing backend.

HTTP endpoints:
- регистрация и вход (/register/*, /login)
- жизненный цикл поездки (/request-ride, /accept-ride/{id}, ...)
- списки поездок и свободных водителей

WebSocket:
- /ws — подписка на live-обновления поездок
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.config import settings
from src.common.logger import log_info, setup_logging
from src.infra.database import close_db, get_db, init_db
from src.infra.identity_provider import close_identity_provider
from src.services.api.exception_handlers import register_exception_handlers
from src.services.realtime_ws.connection_manager import ConnectionManager
from src.services.realtime_ws.routes import router as realtime_router
from src.services.ride_service.routes import router as rides_router
from src.services.users_service.routes import router as users_router
from src.shared.models.common import HealthStatus


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Жизненный цикл приложения."""
    setup_logging()
    await init_db()
    await log_info(f"API запущен, окружение: {settings.system.ENVIRONMENT}")

    yield

    await app.state.connection_manager.clear()
    await close_identity_provider()
    await close_db()
    await log_info("API остановлен")


def create_app() -> FastAPI:
    """Собирает приложение; реестр соединений принадлежит экземпляру приложения."""
    app = FastAPI(
        title="Ride Hailing API",
        description="Поездки, регистрация и live-обновления статусов по WebSocket.",
        version=settings.system.VERSION,
        lifespan=lifespan,
    )

    app.state.connection_manager = ConnectionManager()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.deployment.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(users_router)
    app.include_router(rides_router)
    app.include_router(realtime_router)

    @app.get("/health", response_model=HealthStatus, tags=["Health"])
    async def health_check() -> HealthStatus:
        """Проверка здоровья сервиса."""
        db = get_db()
        db_ok = db.is_connected and await db.health_check()
        return HealthStatus(
            service="ride_hailing_api",
            status="healthy" if db_ok else "degraded",
            version=settings.system.VERSION,
            dependencies={"postgres": "healthy" if db_ok else "unhealthy"},
        )

    return app


app = create_app()
