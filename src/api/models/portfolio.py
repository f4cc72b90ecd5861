"""Portfolio API models."""

from __future__ import annotations

from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel

from src.api.models.common import DateTimeWithZ
from src.domain.models.portfolio import Complexity, PortfolioEntry


class PortfolioEntryResponse(BaseModel):
    id: UUID
    student_id: UUID
    milestone_id: UUID
    project_id: UUID
    role: str
    scope: str
    complexity: Complexity
    amount_delivered: Decimal
    currency: str
    on_time: bool
    rating: int | None
    verified_at: DateTimeWithZ

    @classmethod
    def from_domain(cls, entry: PortfolioEntry) -> PortfolioEntryResponse:
        return cls(
            id=entry.id,
            student_id=entry.student_id,
            milestone_id=entry.milestone_id,
            project_id=entry.project_id,
            role=entry.role,
            scope=entry.scope,
            complexity=entry.complexity,
            amount_delivered=entry.amount_delivered,
            currency=entry.currency,
            on_time=entry.on_time,
            rating=entry.rating,
            verified_at=entry.verified_at,
        )
