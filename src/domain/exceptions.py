"""Base exception classes for the collaboration lifecycle domain layer."""

from __future__ import annotations

from typing import Any


class CollaborationError(Exception):
    """Base exception for all domain errors.

    All domain-specific exceptions MUST inherit from this class.
    Every subclass declares a stable, machine-readable ``kind`` so the
    request-handling layer can map failures without string matching.

    All errors are recoverable-by-caller conditions. Retrying (for
    example after a ConcurrentModificationError) is the caller's job.

    Attributes:
        kind: Stable machine-readable error kind.
        message: Human-readable error description.
        details: Optional structured context for clients and logs.
    """

    kind: str = "COLLABORATION_ERROR"

    def __init__(
        self,
        message: str = "",
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception with a message and optional details.

        Args:
            message: Human-readable error description.
            details: Optional structured context (ids, states).
        """
        super().__init__(message)
        self.message = message
        self.details: dict[str, Any] = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Return the wire representation ``{kind, message, details}``."""
        return {
            "kind": self.kind,
            "message": self.message,
            "details": {key: _jsonable(value) for key, value in self.details.items()},
        }


def _jsonable(value: Any) -> Any:
    """Convert detail values (UUIDs, Enums, lists) into JSON-safe values."""
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_jsonable(v) for v in value]
    if hasattr(value, "value") and not isinstance(value, (int, float, str, bool)):
        return value.value
    if isinstance(value, (int, float, str, bool)) or value is None:
        return value
    return str(value)
