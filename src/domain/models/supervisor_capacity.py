"""Supervisor capacity snapshot."""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True, eq=True)
class SupervisorCapacity:
    """Active-assignment counter for one supervisor.

    Invariant: ``0 <= current_active <= max_active``.
    """

    supervisor_id: UUID
    current_active: int
    max_active: int

    def __post_init__(self) -> None:
        if self.max_active < 0:
            raise ValueError(f"max_active must be non-negative, got {self.max_active}")
        if not 0 <= self.current_active <= self.max_active:
            raise ValueError(
                f"current_active must be within [0, {self.max_active}], "
                f"got {self.current_active}"
            )

    @property
    def available(self) -> int:
        """Remaining assignment slots."""
        return self.max_active - self.current_active

    @property
    def has_capacity(self) -> bool:
        return self.current_active < self.max_active
