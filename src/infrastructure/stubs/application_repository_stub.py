"""In-memory application repository stub."""

from __future__ import annotations

from collections.abc import Iterable
from uuid import UUID

from src.application.ports.application_repository import (
    ApplicationRepositoryProtocol,
)
from src.domain.models.application import Application, ApplicationStatus
from src.infrastructure.stubs.versioned_store import VersionedStoreStub


class ApplicationRepositoryStub(
    VersionedStoreStub[Application], ApplicationRepositoryProtocol
):
    """In-memory implementation of ApplicationRepositoryProtocol.

    This stub is NOT suitable for production use.
    """

    entity_type = "application"

    async def list_by_project(self, project_id: UUID) -> list[Application]:
        return [a for a in self._all() if a.project_id == project_id]

    async def list_by_status(self, status: ApplicationStatus) -> list[Application]:
        return [a for a in self._all() if a.status == status]

    async def find_for_students(
        self, project_id: UUID, student_ids: Iterable[UUID]
    ) -> Application | None:
        wanted = set(student_ids)
        for application in self._all():
            if application.project_id == project_id and wanted.intersection(
                application.student_ids
            ):
                return application
        return None
