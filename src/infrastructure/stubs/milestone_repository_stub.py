"""In-memory milestone repository stub."""

from __future__ import annotations

from uuid import UUID

from src.application.ports.milestone_repository import MilestoneRepositoryProtocol
from src.domain.models.milestone import Milestone, MilestoneStatus
from src.infrastructure.stubs.versioned_store import VersionedStoreStub


class MilestoneRepositoryStub(
    VersionedStoreStub[Milestone], MilestoneRepositoryProtocol
):
    """In-memory implementation of MilestoneRepositoryProtocol."""

    entity_type = "milestone"

    async def list_by_project(self, project_id: UUID) -> list[Milestone]:
        return [m for m in self._all() if m.project_id == project_id]

    async def list_by_status(self, status: MilestoneStatus) -> list[Milestone]:
        return [m for m in self._all() if m.status == status]
