"""Milestone submission model."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=True)
class SubmittedFile:
    """A reference to a delivered file. Content lives elsewhere."""

    name: str
    url: str
    size_bytes: int | None = field(default=None)


@dataclass(frozen=True, eq=True)
class Submission:
    """A student's delivery against an IN_PROGRESS milestone.

    Submissions are append-only. A milestone that goes through change
    requests collects one submission per round.

    Attributes:
        id: Unique identifier.
        milestone_id: Milestone the work was delivered for.
        student_id: Submitting student, assigned to the project.
        files: Delivered files, at least one.
        notes: Free-text notes for the reviewers.
        created_at: Submission timestamp (UTC).
    """

    id: UUID
    milestone_id: UUID
    student_id: UUID
    files: tuple[SubmittedFile, ...]
    notes: str
    created_at: datetime = field(default_factory=_utc_now)
