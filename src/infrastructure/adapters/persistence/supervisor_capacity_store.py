"""PostgreSQL supervisor capacity store.

Reservation is a single conditional UPDATE, so the check and the
increment happen atomically in the database:

    UPDATE collab_supervisor_capacity
    SET current_active = current_active + 1
    WHERE supervisor_id = :supervisor_id AND current_active < max_active
    RETURNING current_active, max_active

Supervisors without a row get one lazily with ``default_max``.
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.application.ports.supervisor_capacity_store import (
    SupervisorCapacityStoreProtocol,
)
from src.domain.models.supervisor_capacity import SupervisorCapacity

_ENSURE_ROW = text("""
    INSERT INTO collab_supervisor_capacity (supervisor_id, current_active, max_active)
    VALUES (:supervisor_id, 0, :default_max)
    ON CONFLICT (supervisor_id) DO NOTHING
""")


class PostgresSupervisorCapacityStore(SupervisorCapacityStoreProtocol):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get(self, supervisor_id: UUID, default_max: int) -> SupervisorCapacity:
        async with self._session_factory() as session:
            result = await session.execute(
                text("""
                    SELECT current_active, max_active
                    FROM collab_supervisor_capacity
                    WHERE supervisor_id = :supervisor_id
                """),
                {"supervisor_id": supervisor_id},
            )
            row = result.fetchone()
        if row is None:
            return SupervisorCapacity(supervisor_id, 0, default_max)
        return SupervisorCapacity(supervisor_id, row[0], row[1])

    async def reserve(
        self, supervisor_id: UUID, default_max: int
    ) -> SupervisorCapacity | None:
        params = {"supervisor_id": supervisor_id, "default_max": default_max}
        async with self._session_factory() as session, session.begin():
            await session.execute(_ENSURE_ROW, params)
            result = await session.execute(
                text("""
                    UPDATE collab_supervisor_capacity
                    SET current_active = current_active + 1
                    WHERE supervisor_id = :supervisor_id
                      AND current_active < max_active
                    RETURNING current_active, max_active
                """),
                params,
            )
            row = result.fetchone()
        if row is None:
            return None
        return SupervisorCapacity(supervisor_id, row[0], row[1])

    async def release(self, supervisor_id: UUID, default_max: int) -> SupervisorCapacity:
        params = {"supervisor_id": supervisor_id, "default_max": default_max}
        async with self._session_factory() as session, session.begin():
            await session.execute(_ENSURE_ROW, params)
            result = await session.execute(
                text("""
                    UPDATE collab_supervisor_capacity
                    SET current_active = GREATEST(current_active - 1, 0)
                    WHERE supervisor_id = :supervisor_id
                    RETURNING current_active, max_active
                """),
                params,
            )
            row = result.one()
        return SupervisorCapacity(supervisor_id, row[0], row[1])

    async def set_max_active(
        self, supervisor_id: UUID, max_active: int
    ) -> SupervisorCapacity:
        async with self._session_factory() as session, session.begin():
            await session.execute(
                _ENSURE_ROW, {"supervisor_id": supervisor_id, "default_max": max_active}
            )
            result = await session.execute(
                text("""
                    UPDATE collab_supervisor_capacity
                    SET max_active = :max_active
                    WHERE supervisor_id = :supervisor_id
                      AND current_active <= :max_active
                    RETURNING current_active, max_active
                """),
                {"supervisor_id": supervisor_id, "max_active": max_active},
            )
            row = result.fetchone()
        if row is None:
            raise ValueError(
                f"max_active {max_active} is below the supervisor's active assignments"
            )
        return SupervisorCapacity(supervisor_id, row[0], row[1])
