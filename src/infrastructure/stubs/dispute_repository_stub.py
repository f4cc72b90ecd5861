"""In-memory dispute repository stub."""

from __future__ import annotations

from uuid import UUID

from src.application.ports.dispute_repository import DisputeRepositoryProtocol
from src.domain.models.dispute import Dispute, DisputeSubjectType
from src.infrastructure.stubs.versioned_store import VersionedStoreStub


class DisputeRepositoryStub(VersionedStoreStub[Dispute], DisputeRepositoryProtocol):
    """In-memory implementation of DisputeRepositoryProtocol."""

    entity_type = "dispute"

    async def list_by_subject(
        self, subject_type: DisputeSubjectType, subject_id: UUID
    ) -> list[Dispute]:
        return [
            d
            for d in self._all()
            if d.subject_type == subject_type and d.subject_id == subject_id
        ]

    async def find_open_for_subject(
        self, subject_type: DisputeSubjectType, subject_id: UUID
    ) -> Dispute | None:
        for dispute in await self.list_by_subject(subject_type, subject_id):
            if dispute.is_open:
                return dispute
        return None
