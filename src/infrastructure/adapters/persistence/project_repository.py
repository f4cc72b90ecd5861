"""PostgreSQL project repository."""

from __future__ import annotations

from src.application.ports.project_repository import ProjectRepositoryProtocol
from src.domain.models.project import Project
from src.infrastructure.adapters.persistence.document_store import (
    PostgresDocumentStore,
)


class PostgresProjectRepository(PostgresDocumentStore[Project], ProjectRepositoryProtocol):
    entity_type = "project"
    model = Project
