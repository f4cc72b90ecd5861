"""In-memory supervisor request repository stub."""

from __future__ import annotations

from uuid import UUID

from src.application.ports.supervisor_request_repository import (
    SupervisorRequestRepositoryProtocol,
)
from src.domain.models.supervisor_request import (
    SupervisorRequest,
    SupervisorRequestStatus,
)
from src.infrastructure.stubs.versioned_store import VersionedStoreStub


class SupervisorRequestRepositoryStub(
    VersionedStoreStub[SupervisorRequest], SupervisorRequestRepositoryProtocol
):
    """In-memory implementation of SupervisorRequestRepositoryProtocol."""

    entity_type = "supervisor_request"

    async def find_pending(
        self, project_id: UUID, supervisor_id: UUID
    ) -> SupervisorRequest | None:
        for request in self._all():
            if (
                request.project_id == project_id
                and request.supervisor_id == supervisor_id
                and request.status == SupervisorRequestStatus.PENDING
            ):
                return request
        return None

    async def list_by_supervisor(self, supervisor_id: UUID) -> list[SupervisorRequest]:
        return [r for r in self._all() if r.supervisor_id == supervisor_id]
