"""In-memory supervisor capacity store stub.

Reserve and release run under a single lock so the check and the
increment happen as one step, the in-memory equivalent of the
conditional UPDATE used by the PostgreSQL store.
"""

from __future__ import annotations

import asyncio
from uuid import UUID

from src.application.ports.supervisor_capacity_store import (
    SupervisorCapacityStoreProtocol,
)
from src.domain.models.supervisor_capacity import SupervisorCapacity


class SupervisorCapacityStoreStub(SupervisorCapacityStoreProtocol):
    """In-memory implementation of SupervisorCapacityStoreProtocol."""

    def __init__(self) -> None:
        self._counters: dict[UUID, SupervisorCapacity] = {}
        self._lock = asyncio.Lock()

    def _current(self, supervisor_id: UUID, default_max: int) -> SupervisorCapacity:
        return self._counters.get(
            supervisor_id,
            SupervisorCapacity(supervisor_id, current_active=0, max_active=default_max),
        )

    async def get(self, supervisor_id: UUID, default_max: int) -> SupervisorCapacity:
        return self._current(supervisor_id, default_max)

    async def reserve(
        self, supervisor_id: UUID, default_max: int
    ) -> SupervisorCapacity | None:
        async with self._lock:
            current = self._current(supervisor_id, default_max)
            if not current.has_capacity:
                return None
            updated = SupervisorCapacity(
                supervisor_id, current.current_active + 1, current.max_active
            )
            self._counters[supervisor_id] = updated
            return updated

    async def release(self, supervisor_id: UUID, default_max: int) -> SupervisorCapacity:
        async with self._lock:
            current = self._current(supervisor_id, default_max)
            updated = SupervisorCapacity(
                supervisor_id, max(0, current.current_active - 1), current.max_active
            )
            self._counters[supervisor_id] = updated
            return updated

    async def set_max_active(
        self, supervisor_id: UUID, max_active: int
    ) -> SupervisorCapacity:
        async with self._lock:
            current = self._current(supervisor_id, max_active)
            if max_active < current.current_active:
                raise ValueError(
                    f"max_active {max_active} is below current_active "
                    f"{current.current_active}"
                )
            updated = SupervisorCapacity(supervisor_id, current.current_active, max_active)
            self._counters[supervisor_id] = updated
            return updated

    def clear(self) -> None:
        self._counters.clear()
