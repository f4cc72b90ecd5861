"""Submission repository port. Submissions are append-only."""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from src.domain.models.submission import Submission


class SubmissionRepositoryProtocol(Protocol):
    async def save(self, submission: Submission) -> None:
        """Append a submission."""
        ...

    async def list_by_milestone(self, milestone_id: UUID) -> list[Submission]:
        """List a milestone's submissions, oldest first."""
        ...
