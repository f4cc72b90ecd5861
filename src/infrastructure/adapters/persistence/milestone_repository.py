"""PostgreSQL milestone repository."""

from __future__ import annotations

from uuid import UUID

from src.application.ports.milestone_repository import MilestoneRepositoryProtocol
from src.domain.models.milestone import Milestone, MilestoneStatus
from src.infrastructure.adapters.persistence.document_store import (
    PostgresDocumentStore,
)


class PostgresMilestoneRepository(
    PostgresDocumentStore[Milestone], MilestoneRepositoryProtocol
):
    """Milestones as versioned JSONB documents. Amounts are stored as strings."""

    entity_type = "milestone"
    model = Milestone

    async def list_by_project(self, project_id: UUID) -> list[Milestone]:
        return await self._select(
            "document->>'project_id' = :project_id", {"project_id": str(project_id)}
        )

    async def list_by_status(self, status: MilestoneStatus) -> list[Milestone]:
        return await self._select("document->>'status' = :status", {"status": status.value})
