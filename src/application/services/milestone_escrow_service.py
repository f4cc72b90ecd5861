"""Milestone and escrow workflow service.

This module drives every state change of a Milestone. Status and escrow
status are validated together by the domain model on every transition;
this service loads, delegates the check, and persists with a versioned
compare-and-swap.

Developer Golden Rules:
1. ONE GATE - RELEASED is only reachable through PARTNER_REVIEW with the
   supervisor gate open
2. NO WORK WITHOUT MONEY - IN_PROGRESS and SUBMITTED require FUNDED escrow
3. BEST-EFFORT PORTFOLIO - Release succeeds even if portfolio creation fails
4. NO UNWIND - Reverting a release does not touch escrow
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from structlog import get_logger

from src.config.workflow_config import DEFAULT_WORKFLOW_CONFIG, WorkflowConfig
from src.domain.errors.entity import EntityNotFoundError
from src.domain.errors.state_transition import (
    InvalidStateError,
    InvalidTransitionError,
)
from src.domain.errors.validation import ValidationError
from src.domain.events.collaboration import (
    MILESTONE_CHANGES_REQUESTED_EVENT_TYPE,
    MILESTONE_ESCROW_CHANGED_EVENT_TYPE,
    MILESTONE_RELEASED_EVENT_TYPE,
    MILESTONE_STATUS_CHANGED_EVENT_TYPE,
    CollaborationEvent,
)
from src.domain.models.application import ApplicationStatus
from src.domain.models.dispute import DisputeSubjectType
from src.domain.models.milestone import (
    DELIVERED_STATES,
    DIRECT_UPDATE_TARGETS,
    Milestone,
    MilestoneStatus,
)
from src.domain.models.timestamps import as_utc

if TYPE_CHECKING:
    from src.application.ports.application_repository import (
        ApplicationRepositoryProtocol,
    )
    from src.application.ports.milestone_repository import MilestoneRepositoryProtocol
    from src.application.ports.project_repository import ProjectRepositoryProtocol
    from src.application.ports.time_authority import TimeAuthorityProtocol
    from src.application.services.dispute_guard import DisputeGuard
    from src.application.services.notification_service import NotificationService
    from src.application.services.portfolio_auto_creation_service import (
        PortfolioAutoCreationService,
    )

logger = get_logger(__name__)


class MilestoneEscrowService:
    """Authoritative state machine driver for Milestones and their escrow.

    Example:
        >>> milestone = await service.create_milestone(project_id, "MVP", Decimal("2500"))
        >>> milestone = await service.update_status(milestone.id, MilestoneStatus.FINALIZED)
        >>> milestone = await service.fund_escrow(milestone.id)
        >>> milestone = await service.update_status(milestone.id, MilestoneStatus.IN_PROGRESS)
    """

    def __init__(
        self,
        milestone_repo: MilestoneRepositoryProtocol,
        project_repo: ProjectRepositoryProtocol,
        application_repo: ApplicationRepositoryProtocol,
        time_authority: TimeAuthorityProtocol,
        portfolio: PortfolioAutoCreationService | None = None,
        dispute_guard: DisputeGuard | None = None,
        notifications: NotificationService | None = None,
        config: WorkflowConfig = DEFAULT_WORKFLOW_CONFIG,
    ) -> None:
        """Initialize the milestone escrow service.

        Args:
            milestone_repo: Versioned milestone storage.
            project_repo: Project lookup.
            application_repo: Used to check the project has an assignment.
            time_authority: Clock for transition timestamps.
            portfolio: Portfolio side effect fired on release/completion.
            dispute_guard: Blocks transitions on disputed milestones.
            notifications: Best-effort notification fan-out.
            config: Workflow limits.
        """
        self._milestones = milestone_repo
        self._projects = project_repo
        self._applications = application_repo
        self._time = time_authority
        self._portfolio = portfolio
        self._dispute_guard = dispute_guard
        self._notifications = notifications
        self._config = config

    async def create_milestone(
        self,
        project_id: UUID,
        title: str,
        amount: Decimal,
        currency: str = "USD",
        scope: str = "",
        acceptance_criteria: str = "",
        due_date: datetime | None = None,
    ) -> Milestone:
        """Create a PROPOSED, UNFUNDED milestone.

        Raises:
            EntityNotFoundError: If the project does not exist.
            ValidationError: If the title is blank or amount not positive.
            InvalidStateError: If nobody is assigned to the project yet.

        A naive ``due_date`` is read as UTC.
        """
        log = logger.bind(project_id=str(project_id))

        if await self._projects.get(project_id) is None:
            raise EntityNotFoundError("project", project_id)
        if not title.strip():
            raise ValidationError("title", "Milestone title must not be blank")
        if amount <= 0:
            raise ValidationError("amount", "Milestone amount must be positive")

        applications = await self._applications.list_by_project(project_id)
        if not any(a.status == ApplicationStatus.ASSIGNED for a in applications):
            log.info("milestone_creation_without_assignment")
            raise InvalidStateError(
                entity_type="project",
                entity_id=project_id,
                reason="milestones require at least one ASSIGNED application",
            )

        now = self._time.utcnow()
        milestone = Milestone(
            id=uuid4(),
            project_id=project_id,
            title=title.strip(),
            amount=amount,
            currency=currency,
            scope=scope,
            acceptance_criteria=acceptance_criteria,
            due_date=as_utc(due_date) if due_date is not None else None,
            created_at=now,
            updated_at=now,
        )
        await self._milestones.save(milestone)
        log.info("milestone_created", milestone_id=str(milestone.id), amount=str(amount))
        return milestone

    async def get_milestone(self, milestone_id: UUID) -> Milestone:
        """Load a milestone.

        Raises:
            EntityNotFoundError: If the milestone does not exist.
        """
        milestone = await self._milestones.get(milestone_id)
        if milestone is None:
            raise EntityNotFoundError("milestone", milestone_id)
        return milestone

    async def list_project_milestones(self, project_id: UUID) -> list[Milestone]:
        return await self._milestones.list_by_project(project_id)

    async def update_status(
        self, milestone_id: UUID, target: MilestoneStatus
    ) -> Milestone:
        """Generic guarded move to FINALIZED, IN_PROGRESS or SUPERVISOR_REVIEW.

        Every other target has a dedicated operation.

        Raises:
            InvalidTransitionError: If the target is not reachable here.
            EscrowNotFundedError: If starting work on unfunded escrow.
        """
        milestone, now = await self._load_for_transition(milestone_id)
        if target not in DIRECT_UPDATE_TARGETS:
            raise InvalidTransitionError(
                entity_type="milestone",
                entity_id=milestone.id,
                from_state=milestone.status,
                to_state=target,
                allowed_transitions=sorted(
                    DIRECT_UPDATE_TARGETS & milestone.status.valid_transitions(),
                    key=lambda s: s.value,
                ),
            )

        if target == MilestoneStatus.FINALIZED:
            updated = milestone.finalized(now)
        elif target == MilestoneStatus.IN_PROGRESS:
            updated = milestone.started(now)
        else:
            updated = milestone.review_started(now)
        return await self._save(milestone, updated, MILESTONE_STATUS_CHANGED_EVENT_TYPE, now)

    async def fund_escrow(self, milestone_id: UUID) -> Milestone:
        """UNFUNDED -> FUNDED on a FINALIZED milestone."""
        milestone, now = await self._load_for_transition(milestone_id)
        return await self._save(
            milestone, milestone.funded(now), MILESTONE_ESCROW_CHANGED_EVENT_TYPE, now
        )

    async def hold_escrow(self, milestone_id: UUID) -> Milestone:
        """FUNDED -> HELD while the work is under review."""
        milestone, now = await self._load_for_transition(milestone_id)
        return await self._save(
            milestone, milestone.escrow_held(now), MILESTONE_ESCROW_CHANGED_EVENT_TYPE, now
        )

    async def approve_for_partner(self, milestone_id: UUID) -> Milestone:
        """Supervisor approval: SUPERVISOR_REVIEW -> PARTNER_REVIEW, gate open."""
        milestone, now = await self._load_for_transition(milestone_id)
        return await self._save(
            milestone,
            milestone.approved_for_partner(now),
            MILESTONE_STATUS_CHANGED_EVENT_TYPE,
            now,
        )

    async def request_changes(self, milestone_id: UUID, justification: str) -> Milestone:
        """Send work back: SUPERVISOR_REVIEW/PARTNER_REVIEW -> CHANGES_REQUESTED.

        Raises:
            ValidationError: If the justification is too short.
        """
        reason = justification.strip()
        minimum = self._config.min_change_justification_length
        if len(reason) < minimum:
            raise ValidationError(
                "justification",
                f"Change request justification must be at least {minimum} characters",
            )
        milestone, now = await self._load_for_transition(milestone_id)
        return await self._save(
            milestone,
            milestone.changes_requested(reason, now),
            MILESTONE_CHANGES_REQUESTED_EVENT_TYPE,
            now,
        )

    async def approve_and_release(self, milestone_id: UUID) -> Milestone:
        """Partner approval: PARTNER_REVIEW -> RELEASED, escrow released.

        Portfolio creation is scheduled in the background and its outcome
        never affects the result of this call.

        Raises:
            InvalidStateError: If not in PARTNER_REVIEW, the supervisor
                gate is closed, or escrow is not FUNDED/HELD.
        """
        milestone, now = await self._load_for_transition(milestone_id)
        stored = await self._save(
            milestone, milestone.released(now), MILESTONE_RELEASED_EVENT_TYPE, now
        )
        self._schedule_portfolio(stored)
        return stored

    async def disapprove_and_revert(self, milestone_id: UUID) -> Milestone:
        """RELEASED -> PARTNER_REVIEW. Escrow stays as it is.

        Money already moved is not unwound; only the approval is undone.
        """
        milestone, now = await self._load_for_transition(milestone_id)
        stored = await self._save(
            milestone, milestone.reverted(now), MILESTONE_STATUS_CHANGED_EVENT_TYPE, now
        )
        logger.warning(
            "milestone_release_reverted",
            milestone_id=str(milestone_id),
            escrow_status=stored.escrow_status.value,
        )
        return stored

    async def mark_as_complete(self, milestone_id: UUID) -> Milestone:
        """RELEASED -> COMPLETED. Also fires portfolio creation."""
        milestone, now = await self._load_for_transition(milestone_id)
        stored = await self._save(
            milestone, milestone.completed(now), MILESTONE_STATUS_CHANGED_EVENT_TYPE, now
        )
        self._schedule_portfolio(stored)
        return stored

    async def unmark_as_complete(self, milestone_id: UUID) -> Milestone:
        """COMPLETED -> RELEASED."""
        milestone, now = await self._load_for_transition(milestone_id)
        return await self._save(
            milestone, milestone.uncompleted(now), MILESTONE_STATUS_CHANGED_EVENT_TYPE, now
        )

    async def delete_milestone(self, milestone_id: UUID) -> None:
        """Delete a PROPOSED/FINALIZED milestone whose escrow is untouched.

        Raises:
            IrreversibleStateError: Once escrow or work has touched it.
        """
        milestone, _ = await self._load_for_transition(milestone_id)
        milestone.ensure_deletable()
        await self._milestones.delete(milestone.id, milestone.version)
        logger.info("milestone_deleted", milestone_id=str(milestone_id))

    async def retry_portfolio(self, milestone_id: UUID) -> int:
        """Re-run portfolio creation for a delivered milestone, in the foreground.

        Returns:
            Number of entries created by this run.

        Raises:
            InvalidStateError: If the milestone is not RELEASED/COMPLETED.
        """
        milestone = await self.get_milestone(milestone_id)
        if milestone.status not in DELIVERED_STATES:
            raise InvalidStateError(
                entity_type="milestone",
                entity_id=milestone.id,
                reason="portfolio entries are only created for delivered milestones",
                status=milestone.status,
            )
        if self._portfolio is None:
            return 0
        return await self._portfolio.trigger(milestone.id)

    async def _load_for_transition(self, milestone_id: UUID) -> tuple[Milestone, datetime]:
        milestone = await self.get_milestone(milestone_id)
        if self._dispute_guard is not None:
            await self._dispute_guard.ensure_not_suspended(
                DisputeSubjectType.MILESTONE, milestone.id
            )
        return milestone, self._time.utcnow()

    def _schedule_portfolio(self, milestone: Milestone) -> None:
        if self._portfolio is None:
            return
        self._portfolio.schedule(milestone.id)
        logger.debug("portfolio_creation_scheduled", milestone_id=str(milestone.id))

    async def _save(
        self,
        current: Milestone,
        updated: Milestone,
        event_type: str,
        now: datetime,
    ) -> Milestone:
        stored = await self._milestones.update(updated, current.version)
        logger.info(
            "milestone_transitioned",
            milestone_id=str(stored.id),
            from_status=current.status.value,
            to_status=stored.status.value,
            from_escrow=current.escrow_status.value,
            to_escrow=stored.escrow_status.value,
            version=stored.version,
        )
        if self._notifications is not None:
            await self._notifications.notify(
                CollaborationEvent(
                    event_type=event_type,
                    subject_id=stored.id,
                    occurred_at=now,
                    payload={
                        "project_id": str(stored.project_id),
                        "status": stored.status.value,
                        "escrow_status": stored.escrow_status.value,
                    },
                )
            )
        return stored
