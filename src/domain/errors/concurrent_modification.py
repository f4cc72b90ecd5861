"""Concurrent modification error for optimistic version checks.

Repositories store every mutable record with an integer ``version``. An
update only succeeds when the caller's expected version still matches the
stored one; otherwise the losing writer receives this error.

This is a recoverable error - the caller should re-read the record and
decide whether to retry or abort. The engine never retries on its own.
"""

from __future__ import annotations

from uuid import UUID

from src.domain.exceptions import CollaborationError


class ConcurrentModificationError(CollaborationError):
    """Raised when a compare-and-swap update loses a race.

    Attributes:
        entity_type: Kind of record that was being modified.
        entity_id: UUID of the record.
        expected_version: Version the caller read before modifying.
        actual_version: Version found in storage (None if unknown).
        operation: Name of the workflow operation that failed.
    """

    kind = "CONCURRENT_MODIFICATION"

    def __init__(
        self,
        entity_type: str,
        entity_id: UUID,
        expected_version: int,
        actual_version: int | None = None,
        operation: str = "update",
    ) -> None:
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.expected_version = expected_version
        self.actual_version = actual_version
        self.operation = operation
        super().__init__(
            f"Concurrent modification detected for {entity_type} {entity_id} "
            f"during {operation}. Expected version {expected_version}, "
            f"found {actual_version}. Re-read and retry.",
            details={
                "entity_type": entity_type,
                "entity_id": entity_id,
                "expected_version": expected_version,
                "actual_version": actual_version,
                "operation": operation,
            },
        )
