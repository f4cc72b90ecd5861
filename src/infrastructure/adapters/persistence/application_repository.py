"""PostgreSQL application repository."""

from __future__ import annotations

from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.application.ports.application_repository import (
    ApplicationRepositoryProtocol,
)
from src.domain.models.application import Application, ApplicationStatus
from src.infrastructure.adapters.persistence.document_store import (
    PostgresDocumentStore,
)

# Closed applications release their students for a new application
_CLOSED_STATUSES = frozenset({ApplicationStatus.REJECTED, ApplicationStatus.DECLINED})


class PostgresApplicationRepository(
    PostgresDocumentStore[Application], ApplicationRepositoryProtocol
):
    """Applications as versioned JSONB documents.

    Every write also rewrites the application's rows in
    ``collab_application_claims``. The (project_id, student_id) primary
    key there turns a second active application for a student into an
    IntegrityError, even when two submissions race.
    """

    entity_type = "application"
    model = Application

    async def list_by_project(self, project_id: UUID) -> list[Application]:
        return await self._select(
            "document->>'project_id' = :project_id", {"project_id": str(project_id)}
        )

    async def list_by_status(self, status: ApplicationStatus) -> list[Application]:
        return await self._select("document->>'status' = :status", {"status": status.value})

    async def find_for_students(
        self, project_id: UUID, student_ids: Iterable[UUID]
    ) -> Application | None:
        matches = await self._select(
            "document->>'project_id' = :project_id "
            "AND document->'student_ids' ?| CAST(:student_ids AS TEXT[])",
            {
                "project_id": str(project_id),
                "student_ids": [str(s) for s in student_ids],
            },
        )
        return matches[0] if matches else None

    async def _write_related(self, session: AsyncSession, record: Application) -> None:
        await session.execute(
            text("DELETE FROM collab_application_claims WHERE application_id = :id"),
            {"id": record.id},
        )
        if record.status in _CLOSED_STATUSES:
            return
        await session.execute(
            text("""
                INSERT INTO collab_application_claims
                    (project_id, student_id, application_id)
                VALUES (:project_id, :student_id, :application_id)
            """),
            [
                {
                    "project_id": record.project_id,
                    "student_id": student_id,
                    "application_id": record.id,
                }
                for student_id in record.student_ids
            ],
        )
