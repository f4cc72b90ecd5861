"""Input validation errors raised at service boundaries."""

from __future__ import annotations

from src.domain.exceptions import CollaborationError


class ValidationError(CollaborationError):
    """Raised when caller-provided input fails a business precondition.

    Attributes:
        field: Name of the offending field.
    """

    kind = "VALIDATION_ERROR"

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(message, details={"field": field})
