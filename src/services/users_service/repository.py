from typing import Optional, List
from src.infra.database import DatabaseManager
from src.shared.models.user_dto import UserDTO, DriverDTO
from src.shared.models.enums import UserType, AvailabilityStatus

USER_COLUMNS = "id, auth_id, name, type, created_at"
DRIVER_COLUMNS = "id, auth_id, availability_status, ride_type, created_at"

class UserRepository:
    def __init__(self, db: DatabaseManager):
        self.db = db

    async def create_passenger(self, auth_id: str, name: Optional[str]) -> UserDTO:
        """Создаёт пользователя-пассажира."""
        query = f"""
            INSERT INTO users (auth_id, name, type)
            VALUES ($1, $2, $3)
            RETURNING {USER_COLUMNS}
        """
        async with self.db.acquire() as conn:
            record = await conn.fetchrow(query, auth_id, name, UserType.PASSENGER.value)
            return UserDTO(**dict(record))

    async def create_driver(self, auth_id: str, name: Optional[str], ride_type: Optional[str]) -> DriverDTO:
        """Создаёт пользователя-водителя и профиль водителя в одной транзакции."""
        async with self.db.transaction() as conn:
            user_record = await conn.fetchrow(
                f"""
                INSERT INTO users (auth_id, name, type)
                VALUES ($1, $2, $3)
                RETURNING {USER_COLUMNS}
                """,
                auth_id,
                name,
                UserType.DRIVER.value,
            )
            driver_record = await conn.fetchrow(
                f"""
                INSERT INTO drivers (auth_id, availability_status, ride_type)
                VALUES ($1, $2, $3)
                RETURNING {DRIVER_COLUMNS}
                """,
                auth_id,
                AvailabilityStatus.UNAVAILABLE.value,
                ride_type,
            )
            return DriverDTO(**dict(driver_record), user=UserDTO(**dict(user_record)))

    async def get_user_by_auth_id(self, auth_id: str) -> Optional[UserDTO]:
        """Получает пользователя по ID аккаунта провайдера."""
        record = await self.db.fetchrow(f"SELECT {USER_COLUMNS} FROM users WHERE auth_id = $1", auth_id)
        return UserDTO(**dict(record)) if record else None

    async def get_driver_by_auth_id(self, auth_id: str) -> Optional[DriverDTO]:
        """Получает профиль водителя."""
        record = await self.db.fetchrow(f"SELECT {DRIVER_COLUMNS} FROM drivers WHERE auth_id = $1", auth_id)
        return DriverDTO(**dict(record)) if record else None

    async def get_available_drivers(self, ride_type: str) -> List[DriverDTO]:
        """Свободные водители заданного класса вместе с данными пользователя."""
        query = """
            SELECT
                d.id, d.auth_id, d.availability_status, d.ride_type, d.created_at,
                u.id AS user_id, u.name AS user_name, u.type AS user_type, u.created_at AS user_created_at
            FROM drivers d
            JOIN users u ON u.auth_id = d.auth_id
            WHERE d.availability_status = $1 AND d.ride_type = $2
            ORDER BY d.id
        """
        records = await self.db.fetch(query, AvailabilityStatus.AVAILABLE.value, ride_type)
        return [
            DriverDTO(
                id=record["id"],
                auth_id=record["auth_id"],
                availability_status=record["availability_status"],
                ride_type=record["ride_type"],
                created_at=record["created_at"],
                user=UserDTO(
                    id=record["user_id"],
                    auth_id=record["auth_id"],
                    name=record["user_name"],
                    type=record["user_type"],
                    created_at=record["user_created_at"],
                ),
            )
            for record in records
        ]
