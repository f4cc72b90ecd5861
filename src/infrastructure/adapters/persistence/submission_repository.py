"""PostgreSQL submission repository.

Submissions are append-only and stored in the document table at a
fixed version of 1.
"""

from __future__ import annotations

import json
from uuid import UUID

from pydantic import TypeAdapter
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.application.ports.submission_repository import (
    SubmissionRepositoryProtocol,
)
from src.domain.models.submission import Submission

_ENTITY_TYPE = "submission"
_adapter: TypeAdapter[Submission] = TypeAdapter(Submission)


class PostgresSubmissionRepository(SubmissionRepositoryProtocol):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def save(self, submission: Submission) -> None:
        async with self._session_factory() as session, session.begin():
            await session.execute(
                text("""
                    INSERT INTO collab_documents
                        (entity_type, id, version, document, created_at)
                    VALUES
                        (:entity_type, :id, 1, CAST(:document AS JSONB), :created_at)
                """),
                {
                    "entity_type": _ENTITY_TYPE,
                    "id": submission.id,
                    "document": json.dumps(_adapter.dump_python(submission, mode="json")),
                    "created_at": submission.created_at,
                },
            )

    async def list_by_milestone(self, milestone_id: UUID) -> list[Submission]:
        async with self._session_factory() as session:
            result = await session.execute(
                text("""
                    SELECT document FROM collab_documents
                    WHERE entity_type = :entity_type
                      AND document->>'milestone_id' = :milestone_id
                    ORDER BY created_at ASC
                """),
                {"entity_type": _ENTITY_TYPE, "milestone_id": str(milestone_id)},
            )
            rows = result.fetchall()
        return [_adapter.validate_python(_as_dict(row[0])) for row in rows]


def _as_dict(document: object) -> object:
    return json.loads(document) if isinstance(document, str) else document
