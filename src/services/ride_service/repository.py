from typing import Optional, List, Any
from asyncpg import Record
from src.infra.database import DatabaseManager
from src.shared.models.ride_dto import RideDTO
from src.shared.models.user_dto import UserDTO, DriverDTO
from src.shared.models.enums import RideStatus

# Колонки, которые разрешено менять частичным обновлением
UPDATABLE_COLUMNS = ("pickup_location", "drop_location", "ride_type", "status", "driver_id")

RIDE_SNAPSHOT_QUERY = """
    SELECT
        r.id, r.pickup_location, r.drop_location, r.ride_type, r.status,
        r.passenger_id, r.driver_id, r.created_at, r.updated_at,
        u.auth_id AS p_auth_id, u.name AS p_name, u.type AS p_type, u.created_at AS p_created_at,
        d.auth_id AS d_auth_id, d.availability_status AS d_availability_status,
        d.ride_type AS d_ride_type, d.created_at AS d_created_at
    FROM rides r
    JOIN users u ON u.id = r.passenger_id
    LEFT JOIN drivers d ON d.id = r.driver_id
"""

class RideRepository:
    def __init__(self, db: DatabaseManager):
        self.db = db

    async def create_ride(self, pickup_location: str, drop_location: str, ride_type: str, passenger_id: int) -> RideDTO:
        """Создаёт поездку в статусе Requested и возвращает снимок с пассажиром."""
        async with self.db.transaction() as conn:
            ride_id = await conn.fetchval(
                """
                INSERT INTO rides (pickup_location, drop_location, ride_type, status, passenger_id)
                VALUES ($1, $2, $3, $4, $5)
                RETURNING id
                """,
                pickup_location,
                drop_location,
                ride_type,
                RideStatus.REQUESTED.value,
                passenger_id,
            )
            row = await conn.fetchrow(f"{RIDE_SNAPSHOT_QUERY} WHERE r.id = $1", ride_id)
            return self._map_row_to_dto(row)

    async def get_ride(self, ride_id: int) -> Optional[RideDTO]:
        row = await self.db.fetchrow(f"{RIDE_SNAPSHOT_QUERY} WHERE r.id = $1", ride_id)
        return self._map_row_to_dto(row) if row else None

    async def update_ride(
        self,
        ride_id: int,
        fields: dict[str, Any],
        expected_statuses: Optional[List[RideStatus]] = None,
    ) -> Optional[RideDTO]:
        """
        Атомарное частичное обновление одной поездки.

        Args:
            ride_id: ID поездки
            fields: колонка -> значение (только из UPDATABLE_COLUMNS)
            expected_statuses: если задано — обновление применяется только из этих статусов

        Returns:
            Обновлённый снимок или None, если подходящей записи нет
        """
        unknown = set(fields) - set(UPDATABLE_COLUMNS)
        if unknown:
            raise ValueError(f"Нельзя обновить колонки: {sorted(unknown)}")

        assignments = [f"{column} = ${i}" for i, column in enumerate(fields, start=2)]
        assignments.append("updated_at = NOW()")
        args: list[Any] = [ride_id, *fields.values()]

        query = f"UPDATE rides SET {', '.join(assignments)} WHERE id = $1"
        if expected_statuses is not None:
            args.append([status.value for status in expected_statuses])
            query += f" AND status = ANY(${len(args)}::text[])"
        query += " RETURNING id"

        async with self.db.transaction() as conn:
            updated_id = await conn.fetchval(query, *args)
            if updated_id is None:
                return None
            row = await conn.fetchrow(f"{RIDE_SNAPSHOT_QUERY} WHERE r.id = $1", updated_id)
            return self._map_row_to_dto(row)

    async def get_rides_by_passenger(self, passenger_id: int) -> List[RideDTO]:
        rows = await self.db.fetch(
            f"{RIDE_SNAPSHOT_QUERY} WHERE r.passenger_id = $1 ORDER BY r.created_at DESC",
            passenger_id,
        )
        return [self._map_row_to_dto(row) for row in rows]

    async def get_rides_by_driver(self, driver_id: int) -> List[RideDTO]:
        rows = await self.db.fetch(
            f"{RIDE_SNAPSHOT_QUERY} WHERE r.driver_id = $1 ORDER BY r.created_at DESC",
            driver_id,
        )
        return [self._map_row_to_dto(row) for row in rows]

    def _map_row_to_dto(self, row: Record) -> RideDTO:
        data = dict(row)

        passenger = UserDTO(
            id=data["passenger_id"],
            auth_id=data["p_auth_id"],
            name=data.get("p_name"),
            type=data["p_type"],
            created_at=data.get("p_created_at"),
        )

        driver = None
        if data.get("driver_id") is not None and data.get("d_auth_id") is not None:
            driver = DriverDTO(
                id=data["driver_id"],
                auth_id=data["d_auth_id"],
                availability_status=data["d_availability_status"],
                ride_type=data.get("d_ride_type"),
                created_at=data.get("d_created_at"),
            )

        return RideDTO(
            id=data["id"],
            pickup_location=data["pickup_location"],
            drop_location=data["drop_location"],
            ride_type=data["ride_type"],
            status=data["status"],
            passenger_id=data["passenger_id"],
            driver_id=data.get("driver_id"),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
            passenger=passenger,
            driver=driver,
        )
