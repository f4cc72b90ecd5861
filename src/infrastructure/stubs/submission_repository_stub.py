"""In-memory submission repository stub."""

from __future__ import annotations

from uuid import UUID

from src.application.ports.submission_repository import (
    SubmissionRepositoryProtocol,
)
from src.domain.models.submission import Submission


class SubmissionRepositoryStub(SubmissionRepositoryProtocol):
    """Append-only in-memory submission log."""

    def __init__(self) -> None:
        self._submissions: list[Submission] = []

    async def save(self, submission: Submission) -> None:
        self._submissions.append(submission)

    async def list_by_milestone(self, milestone_id: UUID) -> list[Submission]:
        matching = [s for s in self._submissions if s.milestone_id == milestone_id]
        return sorted(matching, key=lambda s: s.created_at)

    def clear(self) -> None:
        self._submissions.clear()
