"""Dispute domain model and escalation ladder.

A dispute attaches to a Milestone, Application or Project and climbs an
organizational ladder until someone resolves or rejects it.

Levels (monotonic, no de-escalation):
    SUPERVISOR -> UNIVERSITY_ADMIN -> SUPER_ADMIN

Status:
    OPEN -> UNDER_REVIEW
    OPEN | UNDER_REVIEW -> RESOLVED | REJECTED   (terminal, any level)
    escalate: OPEN | UNDER_REVIEW at a non-final level -> next level, OPEN
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from uuid import UUID


class DisputeSubjectType(Enum):
    """Kind of record a dispute is raised against."""

    MILESTONE = "MILESTONE"
    APPLICATION = "APPLICATION"
    PROJECT = "PROJECT"


class DisputeLevel(Enum):
    """Organizational tier responsible for the dispute."""

    SUPERVISOR = "SUPERVISOR"
    UNIVERSITY_ADMIN = "UNIVERSITY_ADMIN"
    SUPER_ADMIN = "SUPER_ADMIN"

    @property
    def rank(self) -> int:
        return _LEVEL_ORDER.index(self)

    def next_level(self) -> DisputeLevel | None:
        """Return the next tier up, or None at the top of the ladder."""
        position = self.rank + 1
        return _LEVEL_ORDER[position] if position < len(_LEVEL_ORDER) else None

    def is_final(self) -> bool:
        return self.next_level() is None


_LEVEL_ORDER: tuple[DisputeLevel, ...] = (
    DisputeLevel.SUPERVISOR,
    DisputeLevel.UNIVERSITY_ADMIN,
    DisputeLevel.SUPER_ADMIN,
)


class DisputeStatus(Enum):
    OPEN = "OPEN"
    UNDER_REVIEW = "UNDER_REVIEW"
    RESOLVED = "RESOLVED"
    REJECTED = "REJECTED"

    def is_terminal(self) -> bool:
        return self in {DisputeStatus.RESOLVED, DisputeStatus.REJECTED}


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=True)
class Dispute:
    """A dispute raised by a party to a collaboration.

    Attributes:
        id: Unique identifier.
        subject_type: Kind of record under dispute.
        subject_id: UUID of the record under dispute.
        reason: Short reason.
        description: Full description of the problem.
        raised_by: Party that opened the dispute.
        evidence: Links or file references backing the claim.
        level: Tier currently responsible.
        status: Dispute status.
        resolution: Resolution text once RESOLVED.
        resolved_at: Set when RESOLVED or REJECTED.
        version: Optimistic concurrency version.
    """

    id: UUID
    subject_type: DisputeSubjectType
    subject_id: UUID
    reason: str
    description: str
    raised_by: UUID
    evidence: tuple[str, ...] = field(default=())
    level: DisputeLevel = field(default=DisputeLevel.SUPERVISOR)
    status: DisputeStatus = field(default=DisputeStatus.OPEN)
    resolution: str | None = field(default=None)
    resolved_at: datetime | None = field(default=None)
    version: int = field(default=1)
    created_at: datetime = field(default_factory=_utc_now)
    updated_at: datetime = field(default_factory=_utc_now)

    @property
    def is_open(self) -> bool:
        """OPEN or UNDER_REVIEW disputes suspend their subject."""
        return not self.status.is_terminal()

    def review_started(self, now: datetime) -> Dispute:
        """OPEN -> UNDER_REVIEW at the current level."""
        from src.domain.errors.dispute import InvalidEscalationError

        if self.status != DisputeStatus.OPEN:
            raise InvalidEscalationError(
                self.id,
                f"review can only start on an OPEN dispute, status is {self.status.value}",
                status=self.status,
            )
        return replace(self, status=DisputeStatus.UNDER_REVIEW, updated_at=now)

    def escalated(self, now: datetime) -> Dispute:
        """Move to the next level and reopen.

        Raises:
            InvalidEscalationError: If terminal or already at SUPER_ADMIN.
        """
        from src.domain.errors.dispute import InvalidEscalationError

        if self.status.is_terminal():
            raise InvalidEscalationError(
                self.id,
                f"dispute is already {self.status.value}",
                status=self.status,
                level=self.level,
            )
        next_level = self.level.next_level()
        if next_level is None:
            raise InvalidEscalationError(
                self.id,
                f"dispute is already at the final level {self.level.value}",
                status=self.status,
                level=self.level,
            )
        return replace(
            self, level=next_level, status=DisputeStatus.OPEN, updated_at=now
        )

    def resolved(self, resolution: str, now: datetime) -> Dispute:
        """Close with a resolution."""
        self._require_open("resolve")
        return replace(
            self,
            status=DisputeStatus.RESOLVED,
            resolution=resolution,
            resolved_at=now,
            updated_at=now,
        )

    def rejected(self, now: datetime) -> Dispute:
        """Close without remedy."""
        self._require_open("reject")
        return replace(
            self, status=DisputeStatus.REJECTED, resolved_at=now, updated_at=now
        )

    def _require_open(self, operation: str) -> None:
        from src.domain.errors.dispute import InvalidEscalationError

        if self.status.is_terminal():
            raise InvalidEscalationError(
                self.id,
                f"cannot {operation} a dispute that is already {self.status.value}",
                status=self.status,
            )
