"""Portfolio repository port.

``add_if_absent`` is the only write. It must be atomic with respect to
the (student_id, milestone_id) key so that concurrent creation runs
for the same milestone produce exactly one entry per student.
"""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from src.domain.models.portfolio import PortfolioEntry


class PortfolioRepositoryProtocol(Protocol):
    async def add_if_absent(self, entry: PortfolioEntry) -> bool:
        """Insert the entry unless its key already exists.

        Existing entries are never modified.

        Returns:
            True if the entry was inserted, False if one already existed.
        """
        ...

    async def get(self, student_id: UUID, milestone_id: UUID) -> PortfolioEntry | None:
        ...

    async def list_by_student(self, student_id: UUID) -> list[PortfolioEntry]:
        """List a student's entries, newest first."""
        ...

    async def list_by_milestone(self, milestone_id: UUID) -> list[PortfolioEntry]:
        ...
