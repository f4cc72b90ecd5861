"""Project repository port."""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from src.domain.models.project import Project


class ProjectRepositoryProtocol(Protocol):
    """Protocol for project storage.

    Projects are created elsewhere; the workflows only read them and
    bind supervisors through ``update``.
    """

    async def save(self, project: Project) -> None:
        """Save a new project."""
        ...

    async def get(self, project_id: UUID) -> Project | None:
        """Retrieve a project by ID, None if missing."""
        ...

    async def update(self, project: Project, expected_version: int) -> Project:
        """Versioned compare-and-swap write.

        Raises:
            EntityNotFoundError: If the project does not exist.
            ConcurrentModificationError: If the stored version differs.
        """
        ...
