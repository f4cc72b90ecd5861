"""Portfolio entries derived from delivered milestones.

Entries are write-once. At most one entry exists per
(student_id, milestone_id) pair however many times creation fires.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from uuid import UUID

DEFAULT_PORTFOLIO_ROLE = "Project Contributor"

LOW_COMPLEXITY_CEILING = Decimal("1000")
HIGH_COMPLEXITY_FLOOR = Decimal("5000")


class Complexity(Enum):
    """Rough size of the delivered work, derived from its escrow amount."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"

    @classmethod
    def for_amount(cls, amount: Decimal) -> Complexity:
        if amount < LOW_COMPLEXITY_CEILING:
            return cls.LOW
        if amount > HIGH_COMPLEXITY_FLOOR:
            return cls.HIGH
        return cls.MEDIUM


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=True)
class PortfolioEntry:
    """Verified record of a student's contribution to a milestone.

    Attributes:
        id: Unique identifier.
        student_id: Student credited.
        milestone_id: Milestone delivered.
        project_id: Project the milestone belongs to.
        role: Role the student played.
        scope: Milestone scope at the time of delivery.
        complexity: Derived from the milestone amount.
        amount_delivered: Student's equal share of the milestone amount.
        currency: ISO currency code.
        on_time: Whether the milestone was delivered by its due date.
        rating: Optional partner rating (1-5), never set on creation.
        verified_at: When the entry was created from a released milestone.
    """

    id: UUID
    student_id: UUID
    milestone_id: UUID
    project_id: UUID
    role: str = field(default=DEFAULT_PORTFOLIO_ROLE)
    scope: str = field(default="")
    complexity: Complexity = field(default=Complexity.MEDIUM)
    amount_delivered: Decimal = field(default=Decimal("0"))
    currency: str = field(default="USD")
    on_time: bool = field(default=True)
    rating: int | None = field(default=None)
    verified_at: datetime = field(default_factory=_utc_now)

    def __post_init__(self) -> None:
        if self.rating is not None and not 1 <= self.rating <= 5:
            raise ValueError(f"rating must be between 1 and 5, got {self.rating}")

    @property
    def key(self) -> tuple[UUID, UUID]:
        """Idempotency key."""
        return (self.student_id, self.milestone_id)
