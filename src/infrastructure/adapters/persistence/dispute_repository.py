"""PostgreSQL dispute repository."""

from __future__ import annotations

from uuid import UUID

from src.application.ports.dispute_repository import DisputeRepositoryProtocol
from src.domain.models.dispute import Dispute, DisputeStatus, DisputeSubjectType
from src.infrastructure.adapters.persistence.document_store import (
    PostgresDocumentStore,
)

_OPEN_STATUSES = [DisputeStatus.OPEN.value, DisputeStatus.UNDER_REVIEW.value]


class PostgresDisputeRepository(PostgresDocumentStore[Dispute], DisputeRepositoryProtocol):
    entity_type = "dispute"
    model = Dispute

    async def list_by_subject(
        self, subject_type: DisputeSubjectType, subject_id: UUID
    ) -> list[Dispute]:
        return await self._select(
            "document->>'subject_type' = :subject_type "
            "AND document->>'subject_id' = :subject_id",
            {"subject_type": subject_type.value, "subject_id": str(subject_id)},
        )

    async def find_open_for_subject(
        self, subject_type: DisputeSubjectType, subject_id: UUID
    ) -> Dispute | None:
        matches = await self._select(
            "document->>'subject_type' = :subject_type "
            "AND document->>'subject_id' = :subject_id "
            "AND document->>'status' = ANY(CAST(:statuses AS TEXT[]))",
            {
                "subject_type": subject_type.value,
                "subject_id": str(subject_id),
                "statuses": _OPEN_STATUSES,
            },
        )
        return matches[0] if matches else None
