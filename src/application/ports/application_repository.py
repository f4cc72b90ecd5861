"""Application repository port.

Every write after ``save`` goes through ``update``, a compare-and-swap
on the record's ``version``. Losing writers get
ConcurrentModificationError and must re-read.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol
from uuid import UUID

from src.domain.models.application import Application, ApplicationStatus


class ApplicationRepositoryProtocol(Protocol):
    """Protocol for application storage operations.

    Methods:
        save: Store a new application
        get: Retrieve an application by ID
        update: Versioned compare-and-swap write
        list_by_project: All applications for a project
        list_by_status: Applications in a given status
        find_for_students: Existing application on a project covering
            any of the given students
    """

    async def save(self, application: Application) -> None:
        """Save a new application.

        Raises:
            AlreadyExistsError: If application.id already exists.
        """
        ...

    async def get(self, application_id: UUID) -> Application | None:
        """Retrieve an application by ID, None if missing."""
        ...

    async def update(self, application: Application, expected_version: int) -> Application:
        """Replace the stored application if its version still matches.

        The stored record's version becomes ``expected_version + 1``.

        Args:
            application: New state of the application.
            expected_version: Version the caller read.

        Returns:
            The stored application carrying its new version.

        Raises:
            EntityNotFoundError: If the application does not exist.
            ConcurrentModificationError: If the stored version differs.
        """
        ...

    async def list_by_project(self, project_id: UUID) -> list[Application]:
        """List a project's applications, oldest first."""
        ...

    async def list_by_status(self, status: ApplicationStatus) -> list[Application]:
        """List applications currently in ``status``."""
        ...

    async def find_for_students(
        self, project_id: UUID, student_ids: Iterable[UUID]
    ) -> Application | None:
        """Find an application on the project covering any of the students."""
        ...
