"""Application workflow service.

This module owns every state change of an Application: submission,
screening (shortlist, waitlist, reject, undo), offers and the student's
answer to an offer.

Offer expiry is evaluated lazily. Any read or write that touches an
OFFERED application past its deadline first sweeps it to DECLINED, so
``accept_offer`` can never succeed after the deadline. There is no
background timer; ``sweep_expired_offers`` exists for callers that
want to sweep on a schedule of their own.

Developer Golden Rules:
1. LOAD, VALIDATE, CAS-SAVE - Every transition is checked by the domain
   model before a versioned write
2. RESERVE BEFORE SAVE - Capacity is reserved first and released again
   if the write fails
3. NOTIFY AFTER SAVE - Notifications never fail a transition
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from structlog import get_logger

from src.config.workflow_config import DEFAULT_WORKFLOW_CONFIG, WorkflowConfig
from src.domain.errors.concurrent_modification import ConcurrentModificationError
from src.domain.errors.entity import AlreadyExistsError, EntityNotFoundError
from src.domain.errors.offer import OfferExpiredError
from src.domain.errors.state_transition import InvalidStateError
from src.domain.errors.validation import ValidationError
from src.domain.events.collaboration import (
    APPLICATION_ASSIGNED_EVENT_TYPE,
    APPLICATION_DECLINED_EVENT_TYPE,
    APPLICATION_OFFER_EXPIRED_EVENT_TYPE,
    APPLICATION_OFFERED_EVENT_TYPE,
    APPLICATION_REJECTED_EVENT_TYPE,
    APPLICATION_SHORTLISTED_EVENT_TYPE,
    APPLICATION_SUBMITTED_EVENT_TYPE,
    APPLICATION_WAITLISTED_EVENT_TYPE,
    CollaborationEvent,
)
from src.domain.models.application import (
    Application,
    ApplicantType,
    ApplicationStatus,
)
from src.domain.models.dispute import DisputeSubjectType
from src.domain.models.timestamps import as_utc

if TYPE_CHECKING:
    from src.application.ports.application_repository import (
        ApplicationRepositoryProtocol,
    )
    from src.application.ports.group_directory import GroupDirectoryProtocol
    from src.application.ports.project_repository import ProjectRepositoryProtocol
    from src.application.ports.time_authority import TimeAuthorityProtocol
    from src.application.services.capacity_gate_service import CapacityGateService
    from src.application.services.dispute_guard import DisputeGuard
    from src.application.services.notification_service import NotificationService
    from src.domain.models.project import Project

logger = get_logger(__name__)

_HTML_TAG = re.compile(r"<[^>]*>")


def strip_html(text: str) -> str:
    """Remove HTML tags and surrounding whitespace."""
    return _HTML_TAG.sub("", text).strip()


class ApplicationWorkflowService:
    """Authoritative state machine driver for Applications.

    Example:
        >>> service = ApplicationWorkflowService(
        ...     application_repo=applications,
        ...     project_repo=projects,
        ...     capacity_gate=gate,
        ...     time_authority=clock,
        ... )
        >>> app = await service.submit_application(
        ...     project_id, ApplicantType.INDIVIDUAL, student_id, statement
        ... )
        >>> app = await service.shortlist(app.id)
        >>> app = await service.make_offer(app.id, expires_at=deadline)
        >>> app = await service.accept_offer(app.id)
    """

    def __init__(
        self,
        application_repo: ApplicationRepositoryProtocol,
        project_repo: ProjectRepositoryProtocol,
        capacity_gate: CapacityGateService,
        time_authority: TimeAuthorityProtocol,
        group_directory: GroupDirectoryProtocol | None = None,
        dispute_guard: DisputeGuard | None = None,
        notifications: NotificationService | None = None,
        config: WorkflowConfig = DEFAULT_WORKFLOW_CONFIG,
    ) -> None:
        """Initialize the application workflow service.

        Args:
            application_repo: Versioned application storage.
            project_repo: Project lookup.
            capacity_gate: Supervisor admission control.
            time_authority: Clock used for offer deadlines.
            group_directory: Group membership lookup for GROUP applications.
            dispute_guard: Blocks transitions on disputed applications.
            notifications: Best-effort notification fan-out.
            config: Workflow limits.
        """
        self._applications = application_repo
        self._projects = project_repo
        self._capacity_gate = capacity_gate
        self._time = time_authority
        self._groups = group_directory
        self._dispute_guard = dispute_guard
        self._notifications = notifications
        self._config = config

    # ------------------------------------------------------------------
    # Submission and reads
    # ------------------------------------------------------------------

    async def submit_application(
        self,
        project_id: UUID,
        applicant_type: ApplicantType,
        submitted_by: UUID,
        statement: str,
        group_id: UUID | None = None,
    ) -> Application:
        """Submit an application, or reactivate a closed one.

        A REJECTED or DECLINED application from the same students on the
        same project is reopened as SUBMITTED instead of duplicated.

        Raises:
            EntityNotFoundError: If the project or group does not exist.
            ValidationError: If the statement is too short or the
                submitter is not a member of the group.
            AlreadyExistsError: If an active application already covers
                any of the students.
        """
        log = logger.bind(project_id=str(project_id), submitted_by=str(submitted_by))

        if await self._projects.get(project_id) is None:
            raise EntityNotFoundError("project", project_id)

        cleaned = strip_html(statement)
        if len(cleaned) < self._config.min_statement_length:
            raise ValidationError(
                "statement",
                f"Statement must be at least {self._config.min_statement_length} "
                "characters",
            )

        student_ids = await self._resolve_students(applicant_type, submitted_by, group_id)
        now = self._time.utcnow()

        existing = await self._applications.find_for_students(project_id, student_ids)
        if existing is not None:
            existing = await self._expire_if_due(existing, now)
            if existing.status not in {
                ApplicationStatus.REJECTED,
                ApplicationStatus.DECLINED,
            }:
                log.info("application_already_active", existing_id=str(existing.id))
                raise AlreadyExistsError(
                    "application",
                    f"an active application already exists for project {project_id}",
                    existing_id=existing.id,
                )
            reopened = existing.reactivated(cleaned, student_ids, group_id, now)
            stored = await self._applications.update(reopened, existing.version)
            log.info("application_reactivated", application_id=str(stored.id))
        else:
            stored = Application(
                id=uuid4(),
                project_id=project_id,
                applicant_type=applicant_type,
                student_ids=student_ids,
                statement=cleaned,
                group_id=group_id,
                created_at=now,
                updated_at=now,
            )
            await self._applications.save(stored)
            log.info(
                "application_submitted",
                application_id=str(stored.id),
                applicant_type=applicant_type.value,
                student_count=len(student_ids),
            )

        await self._notify(APPLICATION_SUBMITTED_EVENT_TYPE, stored, now)
        return stored

    async def get_application(self, application_id: UUID) -> Application:
        """Load an application, sweeping an expired offer first.

        Raises:
            EntityNotFoundError: If the application does not exist.
        """
        application = await self._load(application_id)
        return await self._expire_if_due(application, self._time.utcnow())

    async def list_project_applications(self, project_id: UUID) -> list[Application]:
        """List a project's applications, sweeping expired offers."""
        now = self._time.utcnow()
        return [
            await self._expire_if_due(application, now)
            for application in await self._applications.list_by_project(project_id)
        ]

    async def sweep_expired_offers(self) -> int:
        """Decline every OFFERED application past its deadline.

        Returns:
            Number of applications swept.
        """
        now = self._time.utcnow()
        swept = 0
        for application in await self._applications.list_by_status(ApplicationStatus.OFFERED):
            if application.is_offer_expired(now):
                current = await self._expire_if_due(application, now)
                if current.status == ApplicationStatus.DECLINED:
                    swept += 1

        logger.info("expired_offers_swept", swept=swept)
        return swept

    # ------------------------------------------------------------------
    # Screening
    # ------------------------------------------------------------------

    async def shortlist(self, application_id: UUID) -> Application:
        """SUBMITTED -> SHORTLISTED; a no-op if already SHORTLISTED."""
        application, now = await self._load_for_transition(application_id)
        if application.status == ApplicationStatus.SHORTLISTED:
            logger.debug("application_already_shortlisted", application_id=str(application_id))
            return application
        return await self._save(
            application,
            application.shortlisted(now),
            APPLICATION_SHORTLISTED_EVENT_TYPE,
            now,
        )

    async def waitlist(self, application_id: UUID) -> Application:
        """SUBMITTED/SHORTLISTED -> WAITLIST."""
        application, now = await self._load_for_transition(application_id)
        return await self._save(
            application,
            application.waitlisted(now),
            APPLICATION_WAITLISTED_EVENT_TYPE,
            now,
        )

    async def reject(self, application_id: UUID) -> Application:
        """SUBMITTED/SHORTLISTED -> REJECTED, remembering the prior status."""
        application, now = await self._load_for_transition(application_id)
        return await self._save(
            application,
            application.rejected(now),
            APPLICATION_REJECTED_EVENT_TYPE,
            now,
        )

    async def undo_reject(self, application_id: UUID) -> Application:
        """Restore the status replaced by the last rejection, exactly once."""
        application, now = await self._load_for_transition(application_id)
        return await self._save(application, application.reject_undone(now), None, now)

    async def score(self, application_id: UUID, score: int) -> Application:
        """Record a 0-100 screening score."""
        if not 0 <= score <= 100:
            raise ValidationError("score", "Score must be between 0 and 100")
        application, now = await self._load_for_transition(application_id)
        return await self._save(application, application.scored(score, now), None, now)

    # ------------------------------------------------------------------
    # Offers
    # ------------------------------------------------------------------

    async def make_offer(
        self,
        application_id: UUID,
        expires_at: datetime | None = None,
        supervisor_id: UUID | None = None,
    ) -> Application:
        """SHORTLISTED -> OFFERED with a deadline.

        Args:
            application_id: Application to offer.
            expires_at: Deadline; defaults to ``default_offer_validity_days``
                from now. A naive datetime is read as UTC.
            supervisor_id: Supervisor to bind on acceptance, overriding
                the project's supervisor.

        Raises:
            ValidationError: If the deadline is not in the future.
        """
        application, now = await self._load_for_transition(application_id)
        if expires_at is not None:
            deadline = as_utc(expires_at)
        else:
            deadline = now + timedelta(days=self._config.default_offer_validity_days)
        if deadline <= now:
            raise ValidationError("expires_at", "Offer deadline must be in the future")
        return await self._save(
            application,
            application.offered(deadline, now, supervisor_id=supervisor_id),
            APPLICATION_OFFERED_EVENT_TYPE,
            now,
        )

    async def accept_offer(self, application_id: UUID) -> Application:
        """OFFERED -> ASSIGNED, reserving supervisor capacity.

        The supervisor is the one named on the offer, falling back to the
        project's supervisor. A project without a supervisor is bound to
        the one named on the offer. Unsupervised projects whose offer
        names nobody skip the capacity gate.

        Raises:
            OfferExpiredError: If the deadline has passed. The application
                is DECLINED when this is raised.
            InvalidTransitionError: If the application is not OFFERED.
            InvalidStateError: If the offer names a supervisor other than
                the one bound to the project.
            CapacityExceededError: If the supervisor is at capacity.
            ConcurrentModificationError: If the application or project
                changed concurrently. Capacity has been released again and
                any supervisor binding made here is undone.
        """
        log = logger.bind(application_id=str(application_id))
        application = await self._load(application_id)
        now = self._time.utcnow()

        if application.is_offer_expired(now):
            expired_at = application.offer_expires_at
            await self._expire_if_due(application, now)
            log.info("offer_acceptance_after_deadline", expired_at=str(expired_at))
            raise OfferExpiredError(application.id, expired_at)  # type: ignore[arg-type]

        await self._ensure_not_suspended(application)

        project = await self._projects.get(application.project_id)
        if project is None:
            raise EntityNotFoundError("project", application.project_id)

        supervisor_id = application.supervisor_id or project.supervisor_id
        if (
            supervisor_id is not None
            and project.supervisor_id is not None
            and supervisor_id != project.supervisor_id
        ):
            raise InvalidStateError(
                entity_type="application",
                entity_id=application.id,
                reason="offer names a supervisor other than the project's",
                supervisor_id=supervisor_id,
                project_supervisor_id=project.supervisor_id,
            )

        # Pure validation before any side effect
        assigned = application.assigned(supervisor_id, now)

        if supervisor_id is None:
            stored = await self._applications.update(assigned, application.version)
        else:
            stored = await self._assign_supervised(
                application, assigned, project, supervisor_id, now
            )

        log.info(
            "offer_accepted",
            supervisor_id=str(supervisor_id) if supervisor_id else None,
            version=stored.version,
        )
        await self._notify(APPLICATION_ASSIGNED_EVENT_TYPE, stored, now)
        return stored

    async def decline_offer(self, application_id: UUID) -> Application:
        """OFFERED -> DECLINED.

        Capacity is only reserved on acceptance, so there is nothing to
        release here.

        Raises:
            OfferExpiredError: If the deadline has passed. The application
                is DECLINED by the expiry sweep when this is raised.
        """
        application = await self._load(application_id)
        now = self._time.utcnow()
        if application.is_offer_expired(now):
            expired_at = application.offer_expires_at
            await self._expire_if_due(application, now)
            logger.info(
                "offer_decline_after_deadline",
                application_id=str(application_id),
                expired_at=str(expired_at),
            )
            raise OfferExpiredError(application.id, expired_at)  # type: ignore[arg-type]

        await self._ensure_not_suspended(application)
        return await self._save(
            application,
            application.declined(now),
            APPLICATION_DECLINED_EVENT_TYPE,
            now,
        )

    async def withdraw(self, application_id: UUID) -> Application:
        """Student withdrawal: SUBMITTED/SHORTLISTED/WAITLIST/OFFERED -> DECLINED."""
        application, now = await self._load_for_transition(application_id)
        return await self._save(
            application,
            application.withdrawn(now),
            APPLICATION_DECLINED_EVENT_TYPE,
            now,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _resolve_students(
        self,
        applicant_type: ApplicantType,
        submitted_by: UUID,
        group_id: UUID | None,
    ) -> tuple[UUID, ...]:
        if applicant_type == ApplicantType.INDIVIDUAL:
            if group_id is not None:
                raise ValidationError(
                    "group_id", "Individual applications cannot name a group"
                )
            return (submitted_by,)

        if group_id is None:
            raise ValidationError("group_id", "Group applications require a group_id")
        if self._groups is None:
            raise InvalidStateError(
                entity_type="group",
                entity_id=group_id,
                reason="no group directory is configured",
            )
        group = await self._groups.get_group(group_id)
        if group is None:
            raise EntityNotFoundError("group", group_id)
        if submitted_by not in group.member_ids:
            raise ValidationError(
                "submitted_by", "Only group members can apply on behalf of the group"
            )
        # Membership is frozen here and never re-validated
        return tuple(group.member_ids)

    async def _load(self, application_id: UUID) -> Application:
        application = await self._applications.get(application_id)
        if application is None:
            raise EntityNotFoundError("application", application_id)
        return application

    async def _load_for_transition(
        self, application_id: UUID
    ) -> tuple[Application, datetime]:
        """Load, sweep an expired offer and check for a blocking dispute."""
        now = self._time.utcnow()
        application = await self._expire_if_due(await self._load(application_id), now)
        await self._ensure_not_suspended(application)
        return application, now

    async def _ensure_not_suspended(self, application: Application) -> None:
        if self._dispute_guard is not None:
            await self._dispute_guard.ensure_not_suspended(
                DisputeSubjectType.APPLICATION, application.id
            )

    async def _assign_supervised(
        self,
        application: Application,
        assigned: Application,
        project: Project,
        supervisor_id: UUID,
        now: datetime,
    ) -> Application:
        """Reserve capacity, bind an unsupervised project, then save.

        A failed step undoes the earlier ones in reverse order.
        """
        log = logger.bind(
            application_id=str(application.id), supervisor_id=str(supervisor_id)
        )
        await self._capacity_gate.reserve(supervisor_id)
        try:
            bound = project.with_supervisor(supervisor_id, now)
            bound_stored: Project | None = None
            if bound is not project:
                bound_stored = await self._projects.update(bound, project.version)
                log.info("project_supervisor_bound", project_id=str(project.id))
            try:
                return await self._applications.update(assigned, application.version)
            except Exception:
                if bound_stored is not None:
                    await self._projects.update(
                        bound_stored.without_supervisor(now), bound_stored.version
                    )
                raise
        except Exception:
            await self._capacity_gate.release(supervisor_id)
            log.warning("offer_acceptance_rolled_back")
            raise

    async def _expire_if_due(self, application: Application, now: datetime) -> Application:
        """Sweep an OFFERED application past its deadline to DECLINED.

        A concurrent writer that got there first wins; the stored record
        is returned in that case.
        """
        if not application.is_offer_expired(now):
            return application

        try:
            stored = await self._applications.update(
                application.expired(now), application.version
            )
        except ConcurrentModificationError:
            logger.debug(
                "offer_expiry_sweep_lost_race", application_id=str(application.id)
            )
            return await self._load(application.id)

        logger.info(
            "offer_expired",
            application_id=str(application.id),
            expired_at=str(application.offer_expires_at),
        )
        await self._notify(APPLICATION_OFFER_EXPIRED_EVENT_TYPE, stored, now)
        return stored

    async def _save(
        self,
        current: Application,
        updated: Application,
        event_type: str | None,
        now: datetime,
    ) -> Application:
        stored = await self._applications.update(updated, current.version)
        logger.info(
            "application_transitioned",
            application_id=str(stored.id),
            from_status=current.status.value,
            to_status=stored.status.value,
            version=stored.version,
        )
        if event_type is not None:
            await self._notify(event_type, stored, now)
        return stored

    async def _notify(
        self, event_type: str, application: Application, now: datetime
    ) -> None:
        if self._notifications is None:
            return
        await self._notifications.notify(
            CollaborationEvent(
                event_type=event_type,
                subject_id=application.id,
                occurred_at=now,
                recipient_ids=application.student_ids,
                payload={
                    "project_id": str(application.project_id),
                    "status": application.status.value,
                },
            )
        )
