"""Versioned JSONB document store on PostgreSQL.

Records are frozen dataclasses serialized with a pydantic TypeAdapter.
Updates are a compare-and-swap on the ``version`` column:

    UPDATE collab_documents
    SET document = :document, version = :expected + 1
    WHERE entity_type = :entity_type AND id = :id AND version = :expected
    RETURNING version

Zero rows back means either the record is gone or someone else won the
race; a follow-up read tells the two apart.
"""

from __future__ import annotations

import json
from dataclasses import replace
from typing import Any, Generic, TypeVar
from uuid import UUID

from pydantic import TypeAdapter
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from structlog import get_logger

from src.domain.errors.concurrent_modification import ConcurrentModificationError
from src.domain.errors.entity import AlreadyExistsError, EntityNotFoundError

logger = get_logger(__name__)

RecordT = TypeVar("RecordT", bound=Any)


class PostgresDocumentStore(Generic[RecordT]):
    """Base class for versioned document repositories.

    Subclasses set ``entity_type`` and ``model``.
    """

    entity_type: str = "record"
    model: type[Any]

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._adapter: TypeAdapter[Any] = TypeAdapter(self.model)

    def _dump(self, record: RecordT) -> str:
        return json.dumps(self._adapter.dump_python(record, mode="json"))

    def _load(self, document: Any) -> RecordT:
        if isinstance(document, str):
            document = json.loads(document)
        return self._adapter.validate_python(document)  # type: ignore[no-any-return]

    async def save(self, record: RecordT) -> None:
        try:
            async with self._session_factory() as session, session.begin():
                await session.execute(
                    text("""
                        INSERT INTO collab_documents
                            (entity_type, id, version, document, created_at)
                        VALUES
                            (:entity_type, :id, :version, CAST(:document AS JSONB), :created_at)
                    """),
                    {
                        "entity_type": self.entity_type,
                        "id": record.id,
                        "version": record.version,
                        "document": self._dump(record),
                        "created_at": record.created_at,
                    },
                )
                await self._write_related(session, record)
        except IntegrityError as e:
            raise self._conflict(record, e) from e

    async def get(self, record_id: UUID) -> RecordT | None:
        async with self._session_factory() as session:
            result = await session.execute(
                text("""
                    SELECT document FROM collab_documents
                    WHERE entity_type = :entity_type AND id = :id
                """),
                {"entity_type": self.entity_type, "id": record_id},
            )
            row = result.fetchone()
        return self._load(row[0]) if row else None

    async def update(self, record: RecordT, expected_version: int) -> RecordT:
        stored = replace(record, version=expected_version + 1)
        try:
            async with self._session_factory() as session, session.begin():
                await self._cas_update(session, stored, expected_version)
                await self._write_related(session, stored)
        except IntegrityError as e:
            raise self._conflict(record, e) from e
        return stored

    async def _cas_update(
        self, session: AsyncSession, stored: RecordT, expected_version: int
    ) -> None:
        result = await session.execute(
            text("""
                UPDATE collab_documents
                SET document = CAST(:document AS JSONB), version = :new_version
                WHERE entity_type = :entity_type
                  AND id = :id
                  AND version = :expected_version
                RETURNING version
            """),
            {
                "entity_type": self.entity_type,
                "id": stored.id,
                "document": self._dump(stored),
                "new_version": expected_version + 1,
                "expected_version": expected_version,
            },
        )
        if result.fetchone() is None:
            await self._raise_cas_failure(session, stored.id, expected_version, "update")

    async def _write_related(self, session: AsyncSession, record: RecordT) -> None:
        """Hook for rows kept alongside the document in the same transaction."""

    def _conflict(self, record: RecordT, error: IntegrityError) -> AlreadyExistsError:
        """Translate a primary key or unique index violation.

        asyncpg reports the violated constraint on the driver exception
        that SQLAlchemy chains as the cause of ``error.orig``.
        """
        driver_error = getattr(error.orig, "__cause__", None)
        constraint = getattr(driver_error, "constraint_name", None)
        logger.info(
            "document_unique_conflict",
            entity_type=self.entity_type,
            entity_id=str(record.id),
            constraint=constraint,
        )
        if constraint is None or constraint.endswith("_pkey"):
            return AlreadyExistsError(
                self.entity_type, f"id {record.id} is taken", existing_id=record.id
            )
        return AlreadyExistsError(
            self.entity_type, f"an active record conflicts with {record.id} ({constraint})"
        )

    async def delete(self, record_id: UUID, expected_version: int) -> None:
        async with self._session_factory() as session, session.begin():
            result = await session.execute(
                text("""
                    DELETE FROM collab_documents
                    WHERE entity_type = :entity_type
                      AND id = :id
                      AND version = :expected_version
                    RETURNING id
                """),
                {
                    "entity_type": self.entity_type,
                    "id": record_id,
                    "expected_version": expected_version,
                },
            )
            if result.fetchone() is None:
                await self._raise_cas_failure(session, record_id, expected_version, "delete")

    async def _select(self, where: str, params: dict[str, Any]) -> list[RecordT]:
        """Load records matching an extra WHERE clause, oldest first."""
        async with self._session_factory() as session:
            result = await session.execute(
                text(
                    "SELECT document FROM collab_documents "
                    f"WHERE entity_type = :entity_type AND {where} "
                    "ORDER BY created_at ASC"
                ),
                {"entity_type": self.entity_type, **params},
            )
            rows = result.fetchall()
        return [self._load(row[0]) for row in rows]

    async def _raise_cas_failure(
        self,
        session: AsyncSession,
        record_id: UUID,
        expected_version: int,
        operation: str,
    ) -> None:
        result = await session.execute(
            text("""
                SELECT version FROM collab_documents
                WHERE entity_type = :entity_type AND id = :id
            """),
            {"entity_type": self.entity_type, "id": record_id},
        )
        row = result.fetchone()
        if row is None:
            raise EntityNotFoundError(self.entity_type, record_id)
        logger.info(
            "document_cas_conflict",
            entity_type=self.entity_type,
            entity_id=str(record_id),
            expected_version=expected_version,
            actual_version=row[0],
        )
        raise ConcurrentModificationError(
            entity_type=self.entity_type,
            entity_id=record_id,
            expected_version=expected_version,
            actual_version=row[0],
            operation=operation,
        )
