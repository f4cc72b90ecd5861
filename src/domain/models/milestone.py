"""Milestone domain model with escrow state.

A milestone is a unit of paid work inside a project. Two state axes move
together and are checked jointly on every transition: the workflow
``status`` and the ``escrow_status`` of the money held for the work.

Workflow:
    PROPOSED -> FINALIZED
    FINALIZED -> IN_PROGRESS            (escrow must be FUNDED)
    IN_PROGRESS -> SUBMITTED            (escrow must be FUNDED)
    SUBMITTED -> SUPERVISOR_REVIEW
    SUPERVISOR_REVIEW -> PARTNER_REVIEW (opens the supervisor gate)
    SUPERVISOR_REVIEW -> CHANGES_REQUESTED
    PARTNER_REVIEW -> RELEASED | CHANGES_REQUESTED
    CHANGES_REQUESTED -> IN_PROGRESS
    RELEASED -> COMPLETED | PARTNER_REVIEW (disapprove and revert)
    COMPLETED -> RELEASED

Escrow:
    UNFUNDED -> FUNDED -> HELD -> FUNDED (on change request)
    FUNDED | HELD -> RELEASED

Invariants checked on construction:
    - IN_PROGRESS implies FUNDED
    - RELEASED implies the supervisor gate is open and escrow is
      FUNDED or RELEASED
    - every status from IN_PROGRESS onwards has escrow past UNFUNDED
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from uuid import UUID


class MilestoneStatus(Enum):
    """Workflow state of a milestone."""

    PROPOSED = "PROPOSED"
    FINALIZED = "FINALIZED"
    IN_PROGRESS = "IN_PROGRESS"
    SUBMITTED = "SUBMITTED"
    SUPERVISOR_REVIEW = "SUPERVISOR_REVIEW"
    PARTNER_REVIEW = "PARTNER_REVIEW"
    CHANGES_REQUESTED = "CHANGES_REQUESTED"
    RELEASED = "RELEASED"
    COMPLETED = "COMPLETED"

    def valid_transitions(self) -> frozenset[MilestoneStatus]:
        """Get valid target states from this state."""
        return MILESTONE_TRANSITION_MATRIX.get(self, frozenset())


class EscrowStatus(Enum):
    """State of the money held against a milestone."""

    UNFUNDED = "UNFUNDED"
    FUNDED = "FUNDED"
    HELD = "HELD"
    RELEASED = "RELEASED"


MILESTONE_TRANSITION_MATRIX: dict[MilestoneStatus, frozenset[MilestoneStatus]] = {
    MilestoneStatus.PROPOSED: frozenset({MilestoneStatus.FINALIZED}),
    MilestoneStatus.FINALIZED: frozenset({MilestoneStatus.IN_PROGRESS}),
    MilestoneStatus.IN_PROGRESS: frozenset({MilestoneStatus.SUBMITTED}),
    MilestoneStatus.SUBMITTED: frozenset({MilestoneStatus.SUPERVISOR_REVIEW}),
    MilestoneStatus.SUPERVISOR_REVIEW: frozenset(
        {MilestoneStatus.PARTNER_REVIEW, MilestoneStatus.CHANGES_REQUESTED}
    ),
    MilestoneStatus.PARTNER_REVIEW: frozenset(
        {MilestoneStatus.RELEASED, MilestoneStatus.CHANGES_REQUESTED}
    ),
    MilestoneStatus.CHANGES_REQUESTED: frozenset({MilestoneStatus.IN_PROGRESS}),
    MilestoneStatus.RELEASED: frozenset(
        {MilestoneStatus.COMPLETED, MilestoneStatus.PARTNER_REVIEW}
    ),
    MilestoneStatus.COMPLETED: frozenset({MilestoneStatus.RELEASED}),
}

# Targets reachable through the generic update_status operation
DIRECT_UPDATE_TARGETS: frozenset[MilestoneStatus] = frozenset(
    {
        MilestoneStatus.FINALIZED,
        MilestoneStatus.IN_PROGRESS,
        MilestoneStatus.SUPERVISOR_REVIEW,
    }
)

DELETABLE_STATES: frozenset[MilestoneStatus] = frozenset(
    {MilestoneStatus.PROPOSED, MilestoneStatus.FINALIZED}
)

# Work is in flight; disputes may be raised against these
ACTIVE_MILESTONE_STATES: frozenset[MilestoneStatus] = frozenset(
    {
        MilestoneStatus.IN_PROGRESS,
        MilestoneStatus.SUBMITTED,
        MilestoneStatus.SUPERVISOR_REVIEW,
        MilestoneStatus.PARTNER_REVIEW,
        MilestoneStatus.CHANGES_REQUESTED,
    }
)

HOLDABLE_STATES: frozenset[MilestoneStatus] = frozenset(
    {
        MilestoneStatus.SUBMITTED,
        MilestoneStatus.SUPERVISOR_REVIEW,
        MilestoneStatus.PARTNER_REVIEW,
    }
)

# Portfolio entries are created for milestones in these states
DELIVERED_STATES: frozenset[MilestoneStatus] = frozenset(
    {MilestoneStatus.RELEASED, MilestoneStatus.COMPLETED}
)

_FUNDED_FROM: frozenset[MilestoneStatus] = ACTIVE_MILESTONE_STATES | DELIVERED_STATES


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=True)
class Milestone:
    """A paid unit of work within a project.

    Attributes:
        id: Unique identifier.
        project_id: Owning project.
        title: Short title.
        scope: Description of the deliverable.
        acceptance_criteria: What the partner will check before release.
        due_date: Deadline, used for on-time portfolio stats.
        amount: Escrowed amount, strictly positive.
        currency: ISO currency code.
        status: Workflow state.
        escrow_status: Escrow state.
        supervisor_gate: Set once the supervisor has approved the work
            for partner review. Release requires it.
        change_request_reason: Justification of the latest change request.
        version: Optimistic concurrency version.
        created_at: Creation timestamp (UTC).
        updated_at: Last modification timestamp (UTC).
    """

    id: UUID
    project_id: UUID
    title: str
    amount: Decimal
    currency: str = field(default="USD")
    scope: str = field(default="")
    acceptance_criteria: str = field(default="")
    due_date: datetime | None = field(default=None)
    status: MilestoneStatus = field(default=MilestoneStatus.PROPOSED)
    escrow_status: EscrowStatus = field(default=EscrowStatus.UNFUNDED)
    supervisor_gate: bool = field(default=False)
    change_request_reason: str | None = field(default=None)
    version: int = field(default=1)
    created_at: datetime = field(default_factory=_utc_now)
    updated_at: datetime = field(default_factory=_utc_now)

    def __post_init__(self) -> None:
        """Validate amount and the status/escrow invariants."""
        if self.amount <= 0:
            raise ValueError(f"Milestone amount must be positive, got {self.amount}")
        if (
            self.status == MilestoneStatus.IN_PROGRESS
            and self.escrow_status != EscrowStatus.FUNDED
        ):
            raise ValueError("IN_PROGRESS milestones must have FUNDED escrow")
        if self.status == MilestoneStatus.RELEASED and (
            not self.supervisor_gate
            or self.escrow_status not in {EscrowStatus.FUNDED, EscrowStatus.RELEASED}
        ):
            raise ValueError(
                "RELEASED milestones require the supervisor gate and FUNDED/RELEASED escrow"
            )
        if self.status in _FUNDED_FROM and self.escrow_status == EscrowStatus.UNFUNDED:
            raise ValueError(f"{self.status.value} milestones cannot be UNFUNDED")

    @property
    def is_deletable(self) -> bool:
        """Deletion is allowed until escrow or work has touched the record."""
        return (
            self.status in DELETABLE_STATES
            and self.escrow_status == EscrowStatus.UNFUNDED
        )

    def is_on_time(self) -> bool:
        """Whether the last change happened on or before the due date."""
        return self.due_date is None or self.updated_at <= self.due_date

    def with_status(
        self, new_status: MilestoneStatus, now: datetime, **changes: object
    ) -> Milestone:
        """Create new milestone with updated status, enforcing the matrix.

        Raises:
            InvalidTransitionError: If the move is not in the matrix.
        """
        from src.domain.errors.state_transition import InvalidTransitionError

        if new_status not in self.status.valid_transitions():
            raise InvalidTransitionError(
                entity_type="milestone",
                entity_id=self.id,
                from_state=self.status,
                to_state=new_status,
                allowed_transitions=list(self.status.valid_transitions()),
            )
        return replace(self, status=new_status, updated_at=now, **changes)

    def finalized(self, now: datetime) -> Milestone:
        """PROPOSED -> FINALIZED."""
        return self.with_status(MilestoneStatus.FINALIZED, now)

    def funded(self, now: datetime) -> Milestone:
        """Fund escrow on a FINALIZED, UNFUNDED milestone.

        Raises:
            InvalidStateError: If not FINALIZED or already funded.
        """
        from src.domain.errors.state_transition import InvalidStateError

        if (
            self.status != MilestoneStatus.FINALIZED
            or self.escrow_status != EscrowStatus.UNFUNDED
        ):
            raise InvalidStateError(
                entity_type="milestone",
                entity_id=self.id,
                reason="escrow can only be funded on a FINALIZED, UNFUNDED milestone",
                status=self.status,
                escrow_status=self.escrow_status,
            )
        return replace(self, escrow_status=EscrowStatus.FUNDED, updated_at=now)

    def started(self, now: datetime) -> Milestone:
        """FINALIZED/CHANGES_REQUESTED -> IN_PROGRESS.

        Raises:
            InvalidTransitionError: If IN_PROGRESS is not reachable.
            EscrowNotFundedError: If escrow is not FUNDED.
        """
        from src.domain.errors.escrow import EscrowNotFundedError
        from src.domain.errors.state_transition import InvalidTransitionError

        if MilestoneStatus.IN_PROGRESS not in self.status.valid_transitions():
            raise InvalidTransitionError(
                entity_type="milestone",
                entity_id=self.id,
                from_state=self.status,
                to_state=MilestoneStatus.IN_PROGRESS,
                allowed_transitions=list(self.status.valid_transitions()),
            )
        if self.escrow_status != EscrowStatus.FUNDED:
            raise EscrowNotFundedError(self.id, self.escrow_status)
        return self.with_status(MilestoneStatus.IN_PROGRESS, now)

    def submitted(self, now: datetime) -> Milestone:
        """IN_PROGRESS -> SUBMITTED; only reached through a submission."""
        from src.domain.errors.escrow import EscrowNotFundedError

        if self.escrow_status != EscrowStatus.FUNDED:
            raise EscrowNotFundedError(self.id, self.escrow_status)
        return self.with_status(MilestoneStatus.SUBMITTED, now)

    def review_started(self, now: datetime) -> Milestone:
        """SUBMITTED -> SUPERVISOR_REVIEW."""
        return self.with_status(MilestoneStatus.SUPERVISOR_REVIEW, now)

    def approved_for_partner(self, now: datetime) -> Milestone:
        """SUPERVISOR_REVIEW -> PARTNER_REVIEW, opening the supervisor gate."""
        return self.with_status(
            MilestoneStatus.PARTNER_REVIEW, now, supervisor_gate=True
        )

    def changes_requested(self, reason: str, now: datetime) -> Milestone:
        """Send the work back to the students.

        HELD escrow returns to FUNDED so work can restart. The supervisor
        gate is left as it was.
        """
        escrow = (
            EscrowStatus.FUNDED
            if self.escrow_status == EscrowStatus.HELD
            else self.escrow_status
        )
        return self.with_status(
            MilestoneStatus.CHANGES_REQUESTED,
            now,
            escrow_status=escrow,
            change_request_reason=reason,
        )

    def escrow_held(self, now: datetime) -> Milestone:
        """FUNDED -> HELD while the work is under review.

        Raises:
            InvalidStateError: If escrow is not FUNDED or the milestone
                is not in a review state.
        """
        from src.domain.errors.state_transition import InvalidStateError

        if (
            self.escrow_status != EscrowStatus.FUNDED
            or self.status not in HOLDABLE_STATES
        ):
            raise InvalidStateError(
                entity_type="milestone",
                entity_id=self.id,
                reason="escrow can only be held while FUNDED and under review",
                status=self.status,
                escrow_status=self.escrow_status,
            )
        return replace(self, escrow_status=EscrowStatus.HELD, updated_at=now)

    def released(self, now: datetime) -> Milestone:
        """PARTNER_REVIEW -> RELEASED, releasing escrow.

        Raises:
            InvalidStateError: If not in PARTNER_REVIEW, the supervisor
                gate is closed, or escrow is not FUNDED/HELD.
        """
        from src.domain.errors.state_transition import InvalidStateError

        reason: str | None = None
        if self.status != MilestoneStatus.PARTNER_REVIEW:
            reason = "release requires PARTNER_REVIEW"
        elif not self.supervisor_gate:
            reason = "release requires supervisor approval"
        elif self.escrow_status not in {EscrowStatus.FUNDED, EscrowStatus.HELD}:
            reason = "release requires FUNDED or HELD escrow"
        if reason is not None:
            raise InvalidStateError(
                entity_type="milestone",
                entity_id=self.id,
                reason=reason,
                status=self.status,
                escrow_status=self.escrow_status,
                supervisor_gate=self.supervisor_gate,
            )
        return self.with_status(
            MilestoneStatus.RELEASED, now, escrow_status=EscrowStatus.RELEASED
        )

    def reverted(self, now: datetime) -> Milestone:
        """RELEASED -> PARTNER_REVIEW. Escrow is not touched."""
        from src.domain.errors.state_transition import InvalidTransitionError

        if self.status != MilestoneStatus.RELEASED:
            raise InvalidTransitionError(
                entity_type="milestone",
                entity_id=self.id,
                from_state=self.status,
                to_state=MilestoneStatus.PARTNER_REVIEW,
            )
        return self.with_status(MilestoneStatus.PARTNER_REVIEW, now)

    def completed(self, now: datetime) -> Milestone:
        """RELEASED -> COMPLETED."""
        return self._toggle_completion(MilestoneStatus.RELEASED, MilestoneStatus.COMPLETED, now)

    def uncompleted(self, now: datetime) -> Milestone:
        """COMPLETED -> RELEASED."""
        return self._toggle_completion(MilestoneStatus.COMPLETED, MilestoneStatus.RELEASED, now)

    def ensure_deletable(self) -> None:
        """Raise IrreversibleStateError once the milestone is past draft."""
        from src.domain.errors.state_transition import IrreversibleStateError

        if self.is_deletable:
            return
        state: Enum = (
            self.status if self.status not in DELETABLE_STATES else self.escrow_status
        )
        raise IrreversibleStateError("milestone", self.id, state)

    def _toggle_completion(
        self, source: MilestoneStatus, target: MilestoneStatus, now: datetime
    ) -> Milestone:
        from src.domain.errors.state_transition import InvalidTransitionError

        if self.status != source:
            raise InvalidTransitionError(
                entity_type="milestone",
                entity_id=self.id,
                from_state=self.status,
                to_state=target,
            )
        return self.with_status(target, now)
