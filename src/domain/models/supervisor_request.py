"""Supervisor request model.

A partner (or university admin) asks a supervisor to oversee a project.
Approval consumes one unit of the supervisor's capacity and binds the
supervisor to the project.

State Machine:
    PENDING -> APPROVED | DENIED
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from uuid import UUID


class SupervisorRequestStatus(Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    DENIED = "DENIED"

    def is_terminal(self) -> bool:
        return self != SupervisorRequestStatus.PENDING


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=True)
class SupervisorRequest:
    """A request for a supervisor to oversee a project."""

    id: UUID
    project_id: UUID
    supervisor_id: UUID
    requested_by: UUID
    message: str = field(default="")
    status: SupervisorRequestStatus = field(default=SupervisorRequestStatus.PENDING)
    decided_at: datetime | None = field(default=None)
    version: int = field(default=1)
    created_at: datetime = field(default_factory=_utc_now)
    updated_at: datetime = field(default_factory=_utc_now)

    def approved(self, now: datetime) -> SupervisorRequest:
        """PENDING -> APPROVED."""
        return self._decide(SupervisorRequestStatus.APPROVED, now)

    def denied(self, now: datetime) -> SupervisorRequest:
        """PENDING -> DENIED."""
        return self._decide(SupervisorRequestStatus.DENIED, now)

    def _decide(
        self, target: SupervisorRequestStatus, now: datetime
    ) -> SupervisorRequest:
        from src.domain.errors.state_transition import InvalidTransitionError

        if self.status != SupervisorRequestStatus.PENDING:
            raise InvalidTransitionError(
                entity_type="supervisor_request",
                entity_id=self.id,
                from_state=self.status,
                to_state=target,
            )
        return replace(self, status=target, decided_at=now, updated_at=now)
