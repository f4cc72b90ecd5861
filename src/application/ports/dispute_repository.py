"""Dispute repository port."""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from src.domain.models.dispute import Dispute, DisputeSubjectType


class DisputeRepositoryProtocol(Protocol):
    """Protocol for dispute storage.

    Methods:
        save: Store a new dispute
        get: Retrieve a dispute by ID
        update: Versioned compare-and-swap write
        list_by_subject: Every dispute raised against a subject
        find_open_for_subject: The unresolved dispute suspending a
            subject, if any
    """

    async def save(self, dispute: Dispute) -> None:
        ...

    async def get(self, dispute_id: UUID) -> Dispute | None:
        ...

    async def update(self, dispute: Dispute, expected_version: int) -> Dispute:
        """Versioned compare-and-swap write.

        Raises:
            EntityNotFoundError: If the dispute does not exist.
            ConcurrentModificationError: If the stored version differs.
        """
        ...

    async def list_by_subject(
        self, subject_type: DisputeSubjectType, subject_id: UUID
    ) -> list[Dispute]:
        """List disputes raised against a subject, oldest first."""
        ...

    async def find_open_for_subject(
        self, subject_type: DisputeSubjectType, subject_id: UUID
    ) -> Dispute | None:
        """Return the oldest OPEN/UNDER_REVIEW dispute on the subject."""
        ...
