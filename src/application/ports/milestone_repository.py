"""Milestone repository port."""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from src.domain.models.milestone import Milestone, MilestoneStatus


class MilestoneRepositoryProtocol(Protocol):
    """Protocol for milestone storage.

    Methods:
        save: Store a new milestone
        get: Retrieve a milestone by ID
        update: Versioned compare-and-swap write
        delete: Versioned delete
        list_by_project: All milestones of a project
        list_by_status: Milestones in a given status
    """

    async def save(self, milestone: Milestone) -> None:
        """Save a new milestone."""
        ...

    async def get(self, milestone_id: UUID) -> Milestone | None:
        """Retrieve a milestone by ID, None if missing."""
        ...

    async def update(self, milestone: Milestone, expected_version: int) -> Milestone:
        """Versioned compare-and-swap write.

        Raises:
            EntityNotFoundError: If the milestone does not exist.
            ConcurrentModificationError: If the stored version differs.
        """
        ...

    async def delete(self, milestone_id: UUID, expected_version: int) -> None:
        """Delete the milestone if its version still matches.

        Raises:
            EntityNotFoundError: If the milestone does not exist.
            ConcurrentModificationError: If the stored version differs.
        """
        ...

    async def list_by_project(self, project_id: UUID) -> list[Milestone]:
        """List a project's milestones, oldest first."""
        ...

    async def list_by_status(self, status: MilestoneStatus) -> list[Milestone]:
        ...
