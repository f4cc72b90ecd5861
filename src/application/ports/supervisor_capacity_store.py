"""Supervisor capacity store port.

The store owns the per-supervisor active-assignment counter. ``reserve``
and ``release`` are the only writes and must each be atomic per
supervisor, so that two concurrent reservations can never both succeed
past ``max_active``. In PostgreSQL this is a single conditional
``UPDATE ... WHERE current_active < max_active RETURNING``.
"""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from src.domain.models.supervisor_capacity import SupervisorCapacity


class SupervisorCapacityStoreProtocol(Protocol):
    """Protocol for atomic capacity accounting.

    Supervisors without a stored row are treated as having
    ``default_max`` slots and no active assignments.
    """

    async def get(self, supervisor_id: UUID, default_max: int) -> SupervisorCapacity:
        """Read the current counter."""
        ...

    async def reserve(self, supervisor_id: UUID, default_max: int) -> SupervisorCapacity | None:
        """Atomically increment the counter if a slot is free.

        Returns:
            The counter after the increment, or None when the supervisor
            is already at ``max_active``.
        """
        ...

    async def release(self, supervisor_id: UUID, default_max: int) -> SupervisorCapacity:
        """Atomically decrement the counter, never below zero."""
        ...

    async def set_max_active(self, supervisor_id: UUID, max_active: int) -> SupervisorCapacity:
        """Set a supervisor's limit. Active assignments are kept as they are.

        Raises:
            ValueError: If ``max_active`` is below the current count.
        """
        ...
