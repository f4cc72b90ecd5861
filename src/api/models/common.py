"""Shared API models."""

from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, Field, PlainSerializer

# ISO 8601 with Z suffix (Pydantic v2)
DateTimeWithZ = Annotated[
    datetime,
    PlainSerializer(lambda v: v.isoformat().replace("+00:00", "Z"), return_type=str),
]


class ErrorResponse(BaseModel):
    """Body returned for every domain error.

    Attributes:
        kind: Stable machine-readable error kind.
        message: Human-readable description.
        details: Structured context (ids, states).
    """

    kind: str = Field(..., description="Stable machine-readable error kind")
    message: str = Field(..., description="Human-readable description")
    details: dict[str, Any] = Field(default_factory=dict)
