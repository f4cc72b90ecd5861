"""Project domain model.

Only the parts of a project the collaboration workflows read or write
live here: ownership, lifecycle status and the bound supervisor.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from uuid import UUID


class ProjectStatus(Enum):
    """Publication and delivery state of a project."""

    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    IN_PROGRESS = "IN_PROGRESS"
    ON_HOLD = "ON_HOLD"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

    def is_active(self) -> bool:
        """Projects that are neither finished nor cancelled."""
        return self not in {ProjectStatus.COMPLETED, ProjectStatus.CANCELLED}


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=True)
class Project:
    """A partner-posted project students apply to.

    Attributes:
        id: Unique identifier.
        partner_id: Industry partner that owns the project.
        title: Project title.
        status: Lifecycle state.
        university_id: University the project is offered through.
        budget: Total budget, informational.
        currency: ISO currency code.
        supervisor_id: Supervisor bound to the project, if any. Set by an
            approved supervisor request.
        version: Optimistic concurrency version.
    """

    id: UUID
    partner_id: UUID
    title: str
    status: ProjectStatus = field(default=ProjectStatus.PUBLISHED)
    university_id: UUID | None = field(default=None)
    budget: Decimal | None = field(default=None)
    currency: str = field(default="USD")
    supervisor_id: UUID | None = field(default=None)
    version: int = field(default=1)
    created_at: datetime = field(default_factory=_utc_now)
    updated_at: datetime = field(default_factory=_utc_now)

    def with_supervisor(self, supervisor_id: UUID, now: datetime) -> Project:
        """Bind a supervisor.

        Rebinding the same supervisor is a no-op.

        Raises:
            InvalidStateError: If a different supervisor is already bound.
        """
        from src.domain.errors.state_transition import InvalidStateError

        if self.supervisor_id == supervisor_id:
            return self
        if self.supervisor_id is not None:
            raise InvalidStateError(
                entity_type="project",
                entity_id=self.id,
                reason="a different supervisor is already bound",
                supervisor_id=self.supervisor_id,
            )
        return replace(self, supervisor_id=supervisor_id, updated_at=now)

    def without_supervisor(self, now: datetime) -> Project:
        """Drop the bound supervisor, undoing a binding that could not complete."""
        if self.supervisor_id is None:
            return self
        return replace(self, supervisor_id=None, updated_at=now)
