"""PostgreSQL supervisor request repository."""

from __future__ import annotations

from uuid import UUID

from src.application.ports.supervisor_request_repository import (
    SupervisorRequestRepositoryProtocol,
)
from src.domain.models.supervisor_request import (
    SupervisorRequest,
    SupervisorRequestStatus,
)
from src.infrastructure.adapters.persistence.document_store import (
    PostgresDocumentStore,
)


class PostgresSupervisorRequestRepository(
    PostgresDocumentStore[SupervisorRequest], SupervisorRequestRepositoryProtocol
):
    entity_type = "supervisor_request"
    model = SupervisorRequest

    async def find_pending(
        self, project_id: UUID, supervisor_id: UUID
    ) -> SupervisorRequest | None:
        matches = await self._select(
            "document->>'project_id' = :project_id "
            "AND document->>'supervisor_id' = :supervisor_id "
            "AND document->>'status' = :status",
            {
                "project_id": str(project_id),
                "supervisor_id": str(supervisor_id),
                "status": SupervisorRequestStatus.PENDING.value,
            },
        )
        return matches[0] if matches else None

    async def list_by_supervisor(self, supervisor_id: UUID) -> list[SupervisorRequest]:
        return await self._select(
            "document->>'supervisor_id' = :supervisor_id",
            {"supervisor_id": str(supervisor_id)},
        )
