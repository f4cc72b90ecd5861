"""In-memory portfolio repository stub.

Supports failure injection so tests can check that a broken portfolio
store never fails the milestone transition that triggered it.
"""

from __future__ import annotations

import asyncio
from uuid import UUID

from src.application.ports.portfolio_repository import PortfolioRepositoryProtocol
from src.domain.models.portfolio import PortfolioEntry


class PortfolioRepositoryStub(PortfolioRepositoryProtocol):
    """In-memory implementation of PortfolioRepositoryProtocol.

    Attributes:
        fail_with: When set, every write raises this exception.
        insert_calls: Number of add_if_absent calls, inserted or not.
    """

    def __init__(self) -> None:
        self._entries: dict[tuple[UUID, UUID], PortfolioEntry] = {}
        self._lock = asyncio.Lock()
        self.fail_with: Exception | None = None
        self.insert_calls = 0

    async def add_if_absent(self, entry: PortfolioEntry) -> bool:
        async with self._lock:
            self.insert_calls += 1
            if self.fail_with is not None:
                raise self.fail_with
            if entry.key in self._entries:
                return False
            self._entries[entry.key] = entry
            return True

    async def get(self, student_id: UUID, milestone_id: UUID) -> PortfolioEntry | None:
        return self._entries.get((student_id, milestone_id))

    async def list_by_student(self, student_id: UUID) -> list[PortfolioEntry]:
        matching = [e for e in self._entries.values() if e.student_id == student_id]
        return sorted(matching, key=lambda e: e.verified_at, reverse=True)

    async def list_by_milestone(self, milestone_id: UUID) -> list[PortfolioEntry]:
        return [e for e in self._entries.values() if e.milestone_id == milestone_id]

    def clear(self) -> None:
        self._entries.clear()
        self.fail_with = None
        self.insert_calls = 0
