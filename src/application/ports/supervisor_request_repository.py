"""Supervisor request repository port."""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from src.domain.models.supervisor_request import SupervisorRequest


class SupervisorRequestRepositoryProtocol(Protocol):
    async def save(self, request: SupervisorRequest) -> None:
        ...

    async def get(self, request_id: UUID) -> SupervisorRequest | None:
        ...

    async def update(
        self, request: SupervisorRequest, expected_version: int
    ) -> SupervisorRequest:
        """Versioned compare-and-swap write.

        Raises:
            EntityNotFoundError: If the request does not exist.
            ConcurrentModificationError: If the stored version differs.
        """
        ...

    async def find_pending(
        self, project_id: UUID, supervisor_id: UUID
    ) -> SupervisorRequest | None:
        """Return the PENDING request for this project/supervisor pair."""
        ...

    async def list_by_supervisor(self, supervisor_id: UUID) -> list[SupervisorRequest]:
        ...
