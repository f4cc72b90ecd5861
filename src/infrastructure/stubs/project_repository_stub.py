"""In-memory project repository stub."""

from __future__ import annotations

from src.application.ports.project_repository import ProjectRepositoryProtocol
from src.domain.models.project import Project
from src.infrastructure.stubs.versioned_store import VersionedStoreStub


class ProjectRepositoryStub(VersionedStoreStub[Project], ProjectRepositoryProtocol):
    """In-memory implementation of ProjectRepositoryProtocol."""

    entity_type = "project"
