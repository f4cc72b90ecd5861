"""Application domain model.

This module defines the state machine for a single application from
submission to assignment, rejection or decline, including the offer
deadline.

State Machine:
    SUBMITTED -> SHORTLISTED | WAITLIST | REJECTED | DECLINED (withdrawn)
    SHORTLISTED -> OFFERED | WAITLIST | REJECTED | DECLINED (withdrawn)
    WAITLIST -> DECLINED (withdrawn)
    OFFERED -> ACCEPTED | DECLINED (declined, withdrawn or expired)
    ACCEPTED -> ASSIGNED

Terminal States:
    ASSIGNED, REJECTED, DECLINED. Two explicit escape hatches exist and
    are not part of the matrix: ``reject_undone`` restores the status a
    rejection replaced (exactly once) and ``reactivated`` reopens a
    REJECTED/DECLINED record on resubmission by the same students.

Offer expiry is a pure function of wall-clock time against
``offer_expires_at``. There is no timer: an expired OFFERED application
is swept to DECLINED the next time a service touches it.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from uuid import UUID


class ApplicantType(Enum):
    """Who is applying.

    Types:
        INDIVIDUAL: A single student applying on their own behalf
        GROUP: A student group; members are frozen at submission time
    """

    INDIVIDUAL = "INDIVIDUAL"
    GROUP = "GROUP"


class ApplicationStatus(Enum):
    """State in the application lifecycle."""

    SUBMITTED = "SUBMITTED"
    SHORTLISTED = "SHORTLISTED"
    WAITLIST = "WAITLIST"
    OFFERED = "OFFERED"
    ACCEPTED = "ACCEPTED"
    ASSIGNED = "ASSIGNED"
    REJECTED = "REJECTED"
    DECLINED = "DECLINED"

    def is_terminal(self) -> bool:
        """Check if this state accepts no further forward transitions."""
        return self in TERMINAL_APPLICATION_STATES

    def valid_transitions(self) -> frozenset[ApplicationStatus]:
        """Get valid target states from this state."""
        return APPLICATION_TRANSITION_MATRIX.get(self, frozenset())


TERMINAL_APPLICATION_STATES: frozenset[ApplicationStatus] = frozenset(
    {
        ApplicationStatus.ASSIGNED,
        ApplicationStatus.REJECTED,
        ApplicationStatus.DECLINED,
    }
)

# Students on these applications count as assigned to the project
ASSIGNED_APPLICATION_STATES: frozenset[ApplicationStatus] = frozenset(
    {ApplicationStatus.ACCEPTED, ApplicationStatus.ASSIGNED}
)

APPLICATION_TRANSITION_MATRIX: dict[ApplicationStatus, frozenset[ApplicationStatus]] = {
    ApplicationStatus.SUBMITTED: frozenset(
        {
            ApplicationStatus.SHORTLISTED,
            ApplicationStatus.WAITLIST,
            ApplicationStatus.REJECTED,
            ApplicationStatus.DECLINED,
        }
    ),
    ApplicationStatus.SHORTLISTED: frozenset(
        {
            ApplicationStatus.OFFERED,
            ApplicationStatus.WAITLIST,
            ApplicationStatus.REJECTED,
            ApplicationStatus.DECLINED,
        }
    ),
    ApplicationStatus.WAITLIST: frozenset({ApplicationStatus.DECLINED}),
    ApplicationStatus.OFFERED: frozenset(
        {ApplicationStatus.ACCEPTED, ApplicationStatus.DECLINED}
    ),
    ApplicationStatus.ACCEPTED: frozenset({ApplicationStatus.ASSIGNED}),
    ApplicationStatus.ASSIGNED: frozenset(),
    ApplicationStatus.REJECTED: frozenset(),
    ApplicationStatus.DECLINED: frozenset(),
}

# States a rejection may be undone back into
REJECTABLE_STATES: frozenset[ApplicationStatus] = frozenset(
    {ApplicationStatus.SUBMITTED, ApplicationStatus.SHORTLISTED}
)

# States a student may withdraw from
WITHDRAWABLE_STATES: frozenset[ApplicationStatus] = frozenset(
    {
        ApplicationStatus.SUBMITTED,
        ApplicationStatus.SHORTLISTED,
        ApplicationStatus.WAITLIST,
        ApplicationStatus.OFFERED,
    }
)


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=True)
class Application:
    """An application by a student or group to a project.

    Attributes:
        id: Unique identifier.
        project_id: Project applied to.
        applicant_type: INDIVIDUAL or GROUP.
        student_ids: Students covered by the application. For GROUP
            applications this is the group membership captured at
            submission time and stays authoritative afterwards.
        statement: Motivation statement.
        status: Current lifecycle state.
        group_id: Group behind a GROUP application.
        score: Optional screening score (0-100).
        offer_expires_at: Offer deadline while OFFERED.
        supervisor_id: Supervisor bound when the offer was accepted.
        previous_status: Status replaced by the last rejection, kept so
            the rejection can be undone exactly once.
        version: Optimistic concurrency version.
        created_at: Submission timestamp (UTC).
        updated_at: Last modification timestamp (UTC).
    """

    id: UUID
    project_id: UUID
    applicant_type: ApplicantType
    student_ids: tuple[UUID, ...]
    statement: str
    status: ApplicationStatus = field(default=ApplicationStatus.SUBMITTED)
    group_id: UUID | None = field(default=None)
    score: int | None = field(default=None)
    offer_expires_at: datetime | None = field(default=None)
    supervisor_id: UUID | None = field(default=None)
    previous_status: ApplicationStatus | None = field(default=None)
    version: int = field(default=1)
    created_at: datetime = field(default_factory=_utc_now)
    updated_at: datetime = field(default_factory=_utc_now)

    def __post_init__(self) -> None:
        """Validate applicant shape and score range."""
        if not self.student_ids:
            raise ValueError("Application must cover at least one student")
        if self.applicant_type == ApplicantType.GROUP and self.group_id is None:
            raise ValueError("GROUP applications require a group_id")
        if self.applicant_type == ApplicantType.INDIVIDUAL:
            if len(self.student_ids) != 1:
                raise ValueError("INDIVIDUAL applications cover exactly one student")
            if self.group_id is not None:
                raise ValueError("INDIVIDUAL applications cannot carry a group_id")
        if self.score is not None and not 0 <= self.score <= 100:
            raise ValueError(f"score must be between 0 and 100, got {self.score}")
        if self.status == ApplicationStatus.OFFERED and self.offer_expires_at is None:
            raise ValueError("OFFERED applications require offer_expires_at")

    def is_offer_expired(self, now: datetime) -> bool:
        """Check whether an OFFERED application has passed its deadline."""
        return (
            self.status == ApplicationStatus.OFFERED
            and self.offer_expires_at is not None
            and now > self.offer_expires_at
        )

    def with_status(
        self,
        new_status: ApplicationStatus,
        now: datetime,
        **changes: object,
    ) -> Application:
        """Create new application with updated status.

        Enforces the transition matrix. Since Application is frozen,
        returns a new instance.

        Raises:
            InvalidTransitionError: If the move is not in the matrix.
        """
        from src.domain.errors.state_transition import InvalidTransitionError

        if new_status not in self.status.valid_transitions():
            raise InvalidTransitionError(
                entity_type="application",
                entity_id=self.id,
                from_state=self.status,
                to_state=new_status,
                allowed_transitions=list(self.status.valid_transitions()),
            )
        return replace(self, status=new_status, updated_at=now, **changes)

    def shortlisted(self, now: datetime) -> Application:
        """SUBMITTED -> SHORTLISTED."""
        self._require_from("shortlist", {ApplicationStatus.SUBMITTED})
        return self.with_status(ApplicationStatus.SHORTLISTED, now)

    def waitlisted(self, now: datetime) -> Application:
        """SUBMITTED/SHORTLISTED -> WAITLIST."""
        self._require_from("waitlist", REJECTABLE_STATES)
        return self.with_status(ApplicationStatus.WAITLIST, now)

    def rejected(self, now: datetime) -> Application:
        """SUBMITTED/SHORTLISTED -> REJECTED, remembering the prior status."""
        self._require_from("reject", REJECTABLE_STATES)
        return self.with_status(
            ApplicationStatus.REJECTED, now, previous_status=self.status
        )

    def reject_undone(self, now: datetime) -> Application:
        """Restore the status replaced by the last rejection.

        The remembered status is cleared, so a second undo fails.

        Raises:
            InvalidTransitionError: If not REJECTED or already undone.
        """
        from src.domain.errors.state_transition import InvalidTransitionError

        if self.status != ApplicationStatus.REJECTED or self.previous_status is None:
            raise InvalidTransitionError(
                entity_type="application",
                entity_id=self.id,
                from_state=self.status,
                to_state="undo_reject",
            )
        return replace(
            self, status=self.previous_status, previous_status=None, updated_at=now
        )

    def offered(
        self,
        expires_at: datetime,
        now: datetime,
        supervisor_id: UUID | None = None,
    ) -> Application:
        """SHORTLISTED -> OFFERED with a deadline."""
        self._require_from("offer", {ApplicationStatus.SHORTLISTED})
        if expires_at <= now:
            raise ValueError("Offer deadline must be in the future")
        return self.with_status(
            ApplicationStatus.OFFERED,
            now,
            offer_expires_at=expires_at,
            supervisor_id=supervisor_id or self.supervisor_id,
        )

    def assigned(self, supervisor_id: UUID | None, now: datetime) -> Application:
        """OFFERED -> ACCEPTED -> ASSIGNED in one step.

        The caller checks the offer deadline first.
        """
        accepted = self.with_status(ApplicationStatus.ACCEPTED, now)
        return accepted.with_status(
            ApplicationStatus.ASSIGNED, now, supervisor_id=supervisor_id
        )

    def declined(self, now: datetime) -> Application:
        """OFFERED -> DECLINED."""
        self._require_from("decline_offer", {ApplicationStatus.OFFERED})
        return self.with_status(ApplicationStatus.DECLINED, now)

    def withdrawn(self, now: datetime) -> Application:
        """Student withdrawal from any pre-assignment state -> DECLINED."""
        self._require_from("withdraw", WITHDRAWABLE_STATES)
        return self.with_status(ApplicationStatus.DECLINED, now)

    def expired(self, now: datetime) -> Application:
        """Lazy offer-expiry sweep: OFFERED past deadline -> DECLINED."""
        if not self.is_offer_expired(now):
            raise ValueError(f"Offer for application {self.id} has not expired")
        return self.with_status(ApplicationStatus.DECLINED, now)

    def scored(self, score: int, now: datetime) -> Application:
        """Record a screening score on a non-terminal application."""
        from src.domain.errors.state_transition import InvalidTransitionError

        if self.status.is_terminal():
            raise InvalidTransitionError(
                entity_type="application",
                entity_id=self.id,
                from_state=self.status,
                to_state="score",
            )
        return replace(self, score=score, updated_at=now)

    def reactivated(
        self,
        statement: str,
        student_ids: tuple[UUID, ...],
        group_id: UUID | None,
        now: datetime,
    ) -> Application:
        """Reopen a REJECTED/DECLINED application on resubmission."""
        if self.status not in {ApplicationStatus.REJECTED, ApplicationStatus.DECLINED}:
            raise ValueError(f"Only REJECTED/DECLINED applications can be reactivated, got {self.status.value}")
        return replace(
            self,
            status=ApplicationStatus.SUBMITTED,
            statement=statement,
            student_ids=student_ids,
            group_id=group_id,
            score=None,
            offer_expires_at=None,
            supervisor_id=None,
            previous_status=None,
            updated_at=now,
        )

    def _require_from(
        self, operation: str, allowed: frozenset[ApplicationStatus] | set[ApplicationStatus]
    ) -> None:
        from src.domain.errors.state_transition import InvalidTransitionError

        if self.status not in allowed:
            raise InvalidTransitionError(
                entity_type="application",
                entity_id=self.id,
                from_state=self.status,
                to_state=operation,
                allowed_transitions=list(self.status.valid_transitions()),
            )
