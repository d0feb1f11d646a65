# tests/conftest.py
"""
Общие фикстуры и настройки для тестов.
"""

from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from starlette.websockets import WebSocketState

# Устанавливаем переменные окружения перед импортом модулей
os.environ.setdefault("DB_PASSWORD", "test_password")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test_service_key")
os.environ.setdefault("SUPABASE_ANON_KEY", "test_anon_key")

from src.shared.models.enums import RideStatus, UserType  # noqa: E402
from src.shared.models.ride_dto import RideDTO  # noqa: E402
from src.shared.models.user_dto import DriverDTO, UserDTO  # noqa: E402


# =============================================================================
# ФИКСТУРЫ КОНФИГУРАЦИИ
# =============================================================================

@pytest.fixture(scope="session")
def project_root() -> Path:
    """Корневая директория проекта."""
    return Path(__file__).parent.parent


@pytest.fixture(scope="session")
def config_path(project_root: Path) -> Path:
    """Путь к файлу конфигурации."""
    return project_root / "config" / "config.json"


@pytest.fixture
def mock_config() -> dict[str, Any]:
    """Мок конфигурации для тестов."""
    return {
        "_comment_system": "Системные настройки",
        "PROJECT_NAME": "ride_hailing_test",
        "VERSION": "1.0.0-test",
        "DEBUG": True,
        "LOG_LEVEL": "DEBUG",
        "ENVIRONMENT": "test",
        "API_HOST": "127.0.0.1",
        "API_PORT": 3100,
        "CORS_ORIGINS": ["http://localhost:3001", "http://test.local"],
        "LOG_TO_FILE": False,
        "LOG_FILE_PATH": "logs/test.log",
        "LOG_FORMAT": "json",
        "DB_HOST": "db.test",
        "DB_PORT": 5433,
        "DB_NAME": "ride_hailing_test",
        "DB_USER": "tester",
        "DB_MIN_POOL_SIZE": 1,
        "DB_MAX_POOL_SIZE": 3,
        "DB_COMMAND_TIMEOUT": 15,
        "SUPABASE_URL": "https://project.supabase.test/",
        "IDENTITY_TIMEOUT": 5.0,
        "RIDE_STRICT_TRANSITIONS": True,
    }


@pytest.fixture
def temp_config_file(tmp_path: Path, mock_config: dict[str, Any]) -> Path:
    """Создаёт временный файл конфигурации."""
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps(mock_config, ensure_ascii=False, indent=2))
    return config_file


# =============================================================================
# ФИКСТУРЫ ИНФРАСТРУКТУРЫ (МОКИ)
# =============================================================================

@pytest.fixture
def mock_db() -> AsyncMock:
    """Мок менеджера базы данных."""
    db = AsyncMock()
    db.fetchrow = AsyncMock(return_value=None)
    db.fetch = AsyncMock(return_value=[])
    db.fetchval = AsyncMock(return_value=None)
    return db


class FakeWebSocket:
    """
    Минимальный WebSocket для тестов реестра и рассылки.
    Запоминает отправленные сообщения; может падать при отправке.
    """

    def __init__(self, fail: bool = False, open_: bool = True) -> None:
        self.sent: list[dict[str, Any]] = []
        self.fail = fail
        state = WebSocketState.CONNECTED if open_ else WebSocketState.DISCONNECTED
        self.client_state = state
        self.application_state = state

    async def send_json(self, data: dict[str, Any]) -> None:
        if self.fail:
            raise RuntimeError("connection reset")
        self.sent.append(data)


@pytest.fixture
def make_websocket():
    """Фабрика фейковых WebSocket соединений."""
    def _make(fail: bool = False, open_: bool = True) -> FakeWebSocket:
        return FakeWebSocket(fail=fail, open_=open_)
    return _make


@pytest.fixture
def mock_broadcaster() -> AsyncMock:
    """Мок рассылки событий."""
    broadcaster = AsyncMock()
    broadcaster.broadcast = AsyncMock(return_value=1)
    return broadcaster


# =============================================================================
# ФИКСТУРЫ МОДЕЛЕЙ
# =============================================================================

@pytest.fixture
def passenger() -> UserDTO:
    """Пассажир с id 7."""
    return UserDTO(
        id=7,
        auth_id="auth-passenger-7",
        name="Анна",
        type=UserType.PASSENGER,
        created_at=datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc),
    )


@pytest.fixture
def driver() -> DriverDTO:
    """Водитель с id 3."""
    return DriverDTO(
        id=3,
        auth_id="auth-driver-3",
        availability_status="available",
        ride_type="economy",
        created_at=datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc),
    )


@pytest.fixture
def make_ride(passenger: UserDTO, driver: DriverDTO):
    """Фабрика снимков поездки."""
    def _make(
        ride_id: int = 42,
        status: RideStatus = RideStatus.REQUESTED,
        driver_id: int | None = None,
    ) -> RideDTO:
        return RideDTO(
            id=ride_id,
            pickup_location="Main St 1",
            drop_location="Airport",
            ride_type="economy",
            status=status,
            passenger_id=passenger.id,
            driver_id=driver_id,
            created_at=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
            updated_at=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
            passenger=passenger,
            driver=driver if driver_id == driver.id else None,
        )
    return _make


@pytest.fixture
def sample_ride_row() -> dict[str, Any]:
    """Строка RIDE_SNAPSHOT_QUERY с назначенным водителем."""
    now = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    return {
        "id": 42,
        "pickup_location": "Main St 1",
        "drop_location": "Airport",
        "ride_type": "economy",
        "status": "Accepted",
        "passenger_id": 7,
        "driver_id": 3,
        "created_at": now,
        "updated_at": now,
        "p_auth_id": "auth-passenger-7",
        "p_name": "Анна",
        "p_type": "passenger",
        "p_created_at": now,
        "d_auth_id": "auth-driver-3",
        "d_availability_status": "available",
        "d_ride_type": "economy",
        "d_created_at": now,
    }


@pytest.fixture
def mock_transaction(mock_db: AsyncMock) -> MagicMock:
    """
    Соединение внутри db.transaction() / db.acquire().
    Возвращает conn, на котором настраиваются fetchrow/fetchval.
    """
    conn = AsyncMock()

    class _Ctx:
        async def __aenter__(self):
            return conn

        async def __aexit__(self, exc_type, exc, tb):
            return False

    mock_db.transaction = MagicMock(side_effect=lambda: _Ctx())
    mock_db.acquire = MagicMock(side_effect=lambda: _Ctx())
    return conn
