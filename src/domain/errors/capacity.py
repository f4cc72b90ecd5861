"""Supervisor capacity errors.

Raised by the capacity gate when a supervisor is already holding the
maximum number of concurrently active supervised assignments.
"""

from __future__ import annotations

from uuid import UUID

from src.domain.exceptions import CollaborationError


class CapacityExceededError(CollaborationError):
    """Raised when a reservation would push a supervisor past ``max_active``.

    Attributes:
        supervisor_id: The supervisor whose capacity was checked.
        current_active: Active assignments at the time of the check.
        max_active: Maximum allowed concurrently active assignments.
    """

    kind = "CAPACITY_EXCEEDED"

    def __init__(self, supervisor_id: UUID, current_active: int, max_active: int) -> None:
        self.supervisor_id = supervisor_id
        self.current_active = current_active
        self.max_active = max_active
        super().__init__(
            f"Supervisor {supervisor_id} at capacity: "
            f"{current_active}/{max_active} active assignments",
            details={
                "supervisor_id": supervisor_id,
                "current_active": current_active,
                "max_active": max_active,
            },
        )
