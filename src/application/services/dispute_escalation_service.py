"""Dispute escalation service.

Disputes attach to an in-flight Milestone, Application or Project and
climb the ladder SUPERVISOR -> UNIVERSITY_ADMIN -> SUPER_ADMIN until
they are resolved or rejected. While a dispute is unresolved the
workflows refuse transitions on its subject (see DisputeGuard).

Developer Golden Rules:
1. MONOTONIC - Escalation only moves up; there is no de-escalation
2. ACTIVE SUBJECTS ONLY - Closed or not-yet-started records cannot be
   disputed
3. ONE AT A TIME - A subject carries at most one unresolved dispute
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from structlog import get_logger

from src.domain.errors.dispute import SubjectNotActiveError
from src.domain.errors.entity import AlreadyExistsError, EntityNotFoundError
from src.domain.errors.validation import ValidationError
from src.domain.events.collaboration import (
    DISPUTE_CLOSED_EVENT_TYPE,
    DISPUTE_ESCALATED_EVENT_TYPE,
    DISPUTE_OPENED_EVENT_TYPE,
    CollaborationEvent,
)
from src.domain.models.dispute import Dispute, DisputeSubjectType
from src.domain.models.milestone import ACTIVE_MILESTONE_STATES

if TYPE_CHECKING:
    from src.application.ports.dispute_repository import DisputeRepositoryProtocol
    from src.application.ports.milestone_repository import MilestoneRepositoryProtocol
    from src.application.ports.project_repository import ProjectRepositoryProtocol
    from src.application.ports.time_authority import TimeAuthorityProtocol
    from src.application.services.application_workflow_service import (
        ApplicationWorkflowService,
    )
    from src.application.services.notification_service import NotificationService

logger = get_logger(__name__)

MIN_REASON_LENGTH = 5
MIN_DESCRIPTION_LENGTH = 20
MAX_DESCRIPTION_LENGTH = 2000
MAX_EVIDENCE_ITEMS = 5


def validate_dispute_input(reason: str, description: str, evidence: Sequence[str]) -> None:
    """Check dispute text and evidence limits.

    Raises:
        ValidationError: On the first limit violated.
    """
    if len(reason.strip()) < MIN_REASON_LENGTH:
        raise ValidationError(
            "reason", f"Reason must be at least {MIN_REASON_LENGTH} characters"
        )
    length = len(description.strip())
    if length < MIN_DESCRIPTION_LENGTH:
        raise ValidationError(
            "description",
            f"Description must be at least {MIN_DESCRIPTION_LENGTH} characters",
        )
    if length > MAX_DESCRIPTION_LENGTH:
        raise ValidationError(
            "description",
            f"Description must be at most {MAX_DESCRIPTION_LENGTH} characters",
        )
    if len(evidence) > MAX_EVIDENCE_ITEMS:
        raise ValidationError(
            "evidence", f"At most {MAX_EVIDENCE_ITEMS} evidence items are allowed"
        )


class DisputeEscalationService:
    """Opens disputes and moves them along the escalation ladder.

    Example:
        >>> dispute = await service.create_dispute(
        ...     DisputeSubjectType.MILESTONE, milestone.id,
        ...     reason="Scope creep",
        ...     description="Partner added two features after finalization",
        ...     raised_by=student_id,
        ... )
        >>> dispute = await service.escalate(dispute.id)
        >>> dispute.level
        <DisputeLevel.UNIVERSITY_ADMIN: 'UNIVERSITY_ADMIN'>
    """

    def __init__(
        self,
        dispute_repo: DisputeRepositoryProtocol,
        milestone_repo: MilestoneRepositoryProtocol,
        project_repo: ProjectRepositoryProtocol,
        application_workflow: ApplicationWorkflowService,
        time_authority: TimeAuthorityProtocol,
        notifications: NotificationService | None = None,
    ) -> None:
        """Initialize the dispute escalation service.

        Args:
            dispute_repo: Versioned dispute storage.
            milestone_repo: Milestone lookup for subject checks.
            project_repo: Project lookup for subject checks.
            application_workflow: Application reads, so an expired offer is
                swept before its activity is judged.
            time_authority: Clock for dispute timestamps.
            notifications: Best-effort notification fan-out.
        """
        self._disputes = dispute_repo
        self._milestones = milestone_repo
        self._projects = project_repo
        self._applications = application_workflow
        self._time = time_authority
        self._notifications = notifications

    async def create_dispute(
        self,
        subject_type: DisputeSubjectType,
        subject_id: UUID,
        reason: str,
        description: str,
        raised_by: UUID,
        evidence: Sequence[str] = (),
    ) -> Dispute:
        """Open a dispute at level SUPERVISOR, status OPEN.

        Raises:
            ValidationError: If text or evidence limits are violated.
            EntityNotFoundError: If the subject does not exist.
            SubjectNotActiveError: If the subject is not in flight.
            AlreadyExistsError: If the subject already has an unresolved
                dispute.
        """
        log = logger.bind(subject_type=subject_type.value, subject_id=str(subject_id))
        validate_dispute_input(reason, description, evidence)

        await self._ensure_subject_active(subject_type, subject_id)

        existing = await self._disputes.find_open_for_subject(subject_type, subject_id)
        if existing is not None:
            raise AlreadyExistsError(
                "dispute",
                f"{subject_type.value} {subject_id} already has an unresolved dispute",
                existing_id=existing.id,
            )

        now = self._time.utcnow()
        dispute = Dispute(
            id=uuid4(),
            subject_type=subject_type,
            subject_id=subject_id,
            reason=reason.strip(),
            description=description.strip(),
            raised_by=raised_by,
            evidence=tuple(evidence),
            created_at=now,
            updated_at=now,
        )
        await self._disputes.save(dispute)
        log.info("dispute_opened", dispute_id=str(dispute.id))
        await self._notify(DISPUTE_OPENED_EVENT_TYPE, dispute, now)
        return dispute

    async def get_dispute(self, dispute_id: UUID) -> Dispute:
        dispute = await self._disputes.get(dispute_id)
        if dispute is None:
            raise EntityNotFoundError("dispute", dispute_id)
        return dispute

    async def list_for_subject(
        self, subject_type: DisputeSubjectType, subject_id: UUID
    ) -> list[Dispute]:
        return await self._disputes.list_by_subject(subject_type, subject_id)

    async def start_review(self, dispute_id: UUID) -> Dispute:
        """OPEN -> UNDER_REVIEW at the current level."""
        dispute = await self.get_dispute(dispute_id)
        now = self._time.utcnow()
        return await self._save(dispute, dispute.review_started(now), None, now)

    async def escalate(self, dispute_id: UUID) -> Dispute:
        """Move the dispute one level up and reopen it.

        Raises:
            InvalidEscalationError: If closed or already at SUPER_ADMIN.
        """
        dispute = await self.get_dispute(dispute_id)
        now = self._time.utcnow()
        return await self._save(
            dispute, dispute.escalated(now), DISPUTE_ESCALATED_EVENT_TYPE, now
        )

    async def resolve(self, dispute_id: UUID, resolution: str) -> Dispute:
        """Close the dispute with a resolution, at any level."""
        if not resolution.strip():
            raise ValidationError("resolution", "Resolution must not be blank")
        dispute = await self.get_dispute(dispute_id)
        now = self._time.utcnow()
        return await self._save(
            dispute,
            dispute.resolved(resolution.strip(), now),
            DISPUTE_CLOSED_EVENT_TYPE,
            now,
        )

    async def reject(self, dispute_id: UUID) -> Dispute:
        """Close the dispute without remedy, at any level."""
        dispute = await self.get_dispute(dispute_id)
        now = self._time.utcnow()
        return await self._save(dispute, dispute.rejected(now), DISPUTE_CLOSED_EVENT_TYPE, now)

    async def _ensure_subject_active(
        self, subject_type: DisputeSubjectType, subject_id: UUID
    ) -> None:
        if subject_type == DisputeSubjectType.MILESTONE:
            milestone = await self._milestones.get(subject_id)
            if milestone is None:
                raise EntityNotFoundError("milestone", subject_id)
            if milestone.status not in ACTIVE_MILESTONE_STATES:
                raise SubjectNotActiveError(subject_type, subject_id, milestone.status.value)

        elif subject_type == DisputeSubjectType.APPLICATION:
            application = await self._applications.get_application(subject_id)
            if application.status.is_terminal():
                raise SubjectNotActiveError(
                    subject_type, subject_id, application.status.value
                )

        else:
            project = await self._projects.get(subject_id)
            if project is None:
                raise EntityNotFoundError("project", subject_id)
            if not project.status.is_active():
                raise SubjectNotActiveError(subject_type, subject_id, project.status.value)

    async def _save(
        self,
        current: Dispute,
        updated: Dispute,
        event_type: str | None,
        now: datetime,
    ) -> Dispute:
        stored = await self._disputes.update(updated, current.version)
        logger.info(
            "dispute_transitioned",
            dispute_id=str(stored.id),
            from_level=current.level.value,
            to_level=stored.level.value,
            from_status=current.status.value,
            to_status=stored.status.value,
        )
        if event_type is not None:
            await self._notify(event_type, stored, now)
        return stored

    async def _notify(self, event_type: str, dispute: Dispute, now: datetime) -> None:
        if self._notifications is None:
            return
        await self._notifications.notify(
            CollaborationEvent(
                event_type=event_type,
                subject_id=dispute.id,
                occurred_at=now,
                recipient_ids=(dispute.raised_by,),
                payload={
                    "subject_type": dispute.subject_type.value,
                    "subject_id": str(dispute.subject_id),
                    "level": dispute.level.value,
                    "status": dispute.status.value,
                },
            )
        )
