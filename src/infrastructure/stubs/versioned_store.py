"""Shared in-memory versioned record store for repository stubs.

Simulates the compare-and-swap semantics of the PostgreSQL adapters:
an update only lands when the caller's expected version matches the
stored one, and the stored version is then bumped by one.
"""

from __future__ import annotations

import asyncio
from dataclasses import replace
from typing import Any, Generic, TypeVar
from uuid import UUID

from src.domain.errors.concurrent_modification import ConcurrentModificationError
from src.domain.errors.entity import AlreadyExistsError, EntityNotFoundError

RecordT = TypeVar("RecordT", bound=Any)


class VersionedStoreStub(Generic[RecordT]):
    """Dictionary-backed store of frozen dataclasses keyed by ``id``.

    WARNING: Not for production use.
    """

    entity_type: str = "record"

    def __init__(self) -> None:
        self._records: dict[UUID, RecordT] = {}
        # Lock for simulating atomic CAS operations
        self._cas_lock = asyncio.Lock()

    async def save(self, record: RecordT) -> None:
        async with self._cas_lock:
            if record.id in self._records:
                raise AlreadyExistsError(
                    self.entity_type, f"id {record.id} is taken", existing_id=record.id
                )
            self._records[record.id] = record

    async def get(self, record_id: UUID) -> RecordT | None:
        return self._records.get(record_id)

    async def update(self, record: RecordT, expected_version: int) -> RecordT:
        async with self._cas_lock:
            current = self._records.get(record.id)
            if current is None:
                raise EntityNotFoundError(self.entity_type, record.id)
            if current.version != expected_version:
                raise ConcurrentModificationError(
                    entity_type=self.entity_type,
                    entity_id=record.id,
                    expected_version=expected_version,
                    actual_version=current.version,
                )
            stored = replace(record, version=expected_version + 1)
            self._records[record.id] = stored
            return stored

    async def delete(self, record_id: UUID, expected_version: int) -> None:
        async with self._cas_lock:
            current = self._records.get(record_id)
            if current is None:
                raise EntityNotFoundError(self.entity_type, record_id)
            if current.version != expected_version:
                raise ConcurrentModificationError(
                    entity_type=self.entity_type,
                    entity_id=record_id,
                    expected_version=expected_version,
                    actual_version=current.version,
                    operation="delete",
                )
            del self._records[record_id]

    def _all(self) -> list[RecordT]:
        return sorted(self._records.values(), key=lambda r: r.created_at)

    def clear(self) -> None:
        """Clear all stored records (for testing)."""
        self._records.clear()
