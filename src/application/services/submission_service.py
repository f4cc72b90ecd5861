"""Submission service - students deliver work against a milestone.

A submission is only accepted while the milestone is IN_PROGRESS with
FUNDED escrow. Accepting it appends an immutable Submission and moves
the milestone to SUBMITTED.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from structlog import get_logger

from src.config.workflow_config import DEFAULT_WORKFLOW_CONFIG, WorkflowConfig
from src.domain.errors.entity import EntityNotFoundError
from src.domain.errors.state_transition import InvalidTransitionError
from src.domain.errors.validation import ValidationError
from src.domain.events.collaboration import (
    MILESTONE_SUBMITTED_EVENT_TYPE,
    CollaborationEvent,
)
from src.domain.models.application import ASSIGNED_APPLICATION_STATES
from src.domain.models.dispute import DisputeSubjectType
from src.domain.models.milestone import MilestoneStatus
from src.domain.models.submission import Submission, SubmittedFile

if TYPE_CHECKING:
    from src.application.ports.application_repository import (
        ApplicationRepositoryProtocol,
    )
    from src.application.ports.milestone_repository import MilestoneRepositoryProtocol
    from src.application.ports.submission_repository import (
        SubmissionRepositoryProtocol,
    )
    from src.application.ports.time_authority import TimeAuthorityProtocol
    from src.application.services.dispute_guard import DisputeGuard
    from src.application.services.notification_service import NotificationService

logger = get_logger(__name__)


class SubmissionService:
    """Accepts and lists milestone submissions."""

    def __init__(
        self,
        submission_repo: SubmissionRepositoryProtocol,
        milestone_repo: MilestoneRepositoryProtocol,
        application_repo: ApplicationRepositoryProtocol,
        time_authority: TimeAuthorityProtocol,
        dispute_guard: DisputeGuard | None = None,
        notifications: NotificationService | None = None,
        config: WorkflowConfig = DEFAULT_WORKFLOW_CONFIG,
    ) -> None:
        self._submissions = submission_repo
        self._milestones = milestone_repo
        self._applications = application_repo
        self._time = time_authority
        self._dispute_guard = dispute_guard
        self._notifications = notifications
        self._config = config

    async def submit_work(
        self,
        milestone_id: UUID,
        student_id: UUID,
        files: list[SubmittedFile],
        notes: str,
    ) -> Submission:
        """Record a delivery and move the milestone to SUBMITTED.

        The milestone is written first; the submission is only appended
        once that compare-and-swap has succeeded. If the append fails the
        milestone is put back to IN_PROGRESS.

        Raises:
            EntityNotFoundError: If the milestone does not exist.
            ValidationError: If notes are too short, no file is given or
                the student is not assigned to the project.
            InvalidTransitionError: If the milestone is not IN_PROGRESS.
            EscrowNotFundedError: If escrow is not FUNDED.
        """
        log = logger.bind(milestone_id=str(milestone_id), student_id=str(student_id))

        cleaned_notes = notes.strip()
        minimum = self._config.min_submission_notes_length
        if len(cleaned_notes) < minimum:
            raise ValidationError(
                "notes", f"Submission notes must be at least {minimum} characters"
            )
        if not files:
            raise ValidationError("files", "At least one file is required")

        milestone = await self._milestones.get(milestone_id)
        if milestone is None:
            raise EntityNotFoundError("milestone", milestone_id)
        if self._dispute_guard is not None:
            await self._dispute_guard.ensure_not_suspended(
                DisputeSubjectType.MILESTONE, milestone.id
            )
        if milestone.status != MilestoneStatus.IN_PROGRESS:
            raise InvalidTransitionError(
                entity_type="milestone",
                entity_id=milestone.id,
                from_state=milestone.status,
                to_state=MilestoneStatus.SUBMITTED,
                allowed_transitions=list(milestone.status.valid_transitions()),
            )

        if not await self._is_assigned(milestone.project_id, student_id):
            log.info("submission_by_unassigned_student")
            raise ValidationError(
                "student_id", "Only students assigned to the project can submit work"
            )

        now = self._time.utcnow()
        stored = await self._milestones.update(milestone.submitted(now), milestone.version)

        submission = Submission(
            id=uuid4(),
            milestone_id=milestone.id,
            student_id=student_id,
            files=tuple(files),
            notes=cleaned_notes,
            created_at=now,
        )
        try:
            await self._submissions.save(submission)
        except Exception:
            # Back to IN_PROGRESS so the delivery can be retried
            log.warning("submission_rolled_back", milestone_version=stored.version)
            await self._milestones.update(milestone, stored.version)
            raise

        log.info(
            "work_submitted",
            submission_id=str(submission.id),
            file_count=len(files),
            milestone_version=stored.version,
        )
        if self._notifications is not None:
            await self._notifications.notify(
                CollaborationEvent(
                    event_type=MILESTONE_SUBMITTED_EVENT_TYPE,
                    subject_id=milestone.id,
                    occurred_at=now,
                    recipient_ids=(student_id,),
                    payload={"submission_id": str(submission.id)},
                )
            )
        return submission

    async def list_submissions(self, milestone_id: UUID) -> list[Submission]:
        """List a milestone's submissions, oldest first."""
        return await self._submissions.list_by_milestone(milestone_id)

    async def _is_assigned(self, project_id: UUID, student_id: UUID) -> bool:
        for application in await self._applications.list_by_project(project_id):
            if (
                application.status in ASSIGNED_APPLICATION_STATES
                and student_id in application.student_ids
            ):
                return True
        return False
