"""PostgreSQL portfolio repository.

Idempotency is enforced by the (student_id, milestone_id) primary key
and ``INSERT ... ON CONFLICT DO NOTHING``.
"""

from __future__ import annotations

import json
from uuid import UUID

from pydantic import TypeAdapter
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from structlog import get_logger

from src.application.ports.portfolio_repository import PortfolioRepositoryProtocol
from src.domain.models.portfolio import PortfolioEntry

logger = get_logger(__name__)

_adapter: TypeAdapter[PortfolioEntry] = TypeAdapter(PortfolioEntry)


def _load(document: object) -> PortfolioEntry:
    if isinstance(document, str):
        document = json.loads(document)
    return _adapter.validate_python(document)


class PostgresPortfolioRepository(PortfolioRepositoryProtocol):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def add_if_absent(self, entry: PortfolioEntry) -> bool:
        async with self._session_factory() as session, session.begin():
            result = await session.execute(
                text("""
                    INSERT INTO collab_portfolio_entries
                        (student_id, milestone_id, document, verified_at)
                    VALUES
                        (:student_id, :milestone_id, CAST(:document AS JSONB), :verified_at)
                    ON CONFLICT (student_id, milestone_id) DO NOTHING
                    RETURNING student_id
                """),
                {
                    "student_id": entry.student_id,
                    "milestone_id": entry.milestone_id,
                    "document": json.dumps(_adapter.dump_python(entry, mode="json")),
                    "verified_at": entry.verified_at,
                },
            )
            inserted = result.fetchone() is not None

        if not inserted:
            logger.debug(
                "portfolio_entry_already_exists",
                student_id=str(entry.student_id),
                milestone_id=str(entry.milestone_id),
            )
        return inserted

    async def get(self, student_id: UUID, milestone_id: UUID) -> PortfolioEntry | None:
        async with self._session_factory() as session:
            result = await session.execute(
                text("""
                    SELECT document FROM collab_portfolio_entries
                    WHERE student_id = :student_id AND milestone_id = :milestone_id
                """),
                {"student_id": student_id, "milestone_id": milestone_id},
            )
            row = result.fetchone()
        return _load(row[0]) if row else None

    async def list_by_student(self, student_id: UUID) -> list[PortfolioEntry]:
        async with self._session_factory() as session:
            result = await session.execute(
                text("""
                    SELECT document FROM collab_portfolio_entries
                    WHERE student_id = :student_id
                    ORDER BY verified_at DESC
                """),
                {"student_id": student_id},
            )
            rows = result.fetchall()
        return [_load(row[0]) for row in rows]

    async def list_by_milestone(self, milestone_id: UUID) -> list[PortfolioEntry]:
        async with self._session_factory() as session:
            result = await session.execute(
                text("""
                    SELECT document FROM collab_portfolio_entries
                    WHERE milestone_id = :milestone_id
                """),
                {"milestone_id": milestone_id},
            )
            rows = result.fetchall()
        return [_load(row[0]) for row in rows]
