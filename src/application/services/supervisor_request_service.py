"""Supervisor request service.

Partners ask a supervisor to oversee a project. Approving a request
consumes one unit of the supervisor's capacity and binds the supervisor
to the project. If the binding fails the capacity is given back.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from structlog import get_logger

from src.domain.errors.entity import AlreadyExistsError, EntityNotFoundError
from src.domain.events.collaboration import (
    SUPERVISOR_REQUEST_CREATED_EVENT_TYPE,
    SUPERVISOR_REQUEST_DECIDED_EVENT_TYPE,
    CollaborationEvent,
)
from src.domain.models.supervisor_request import SupervisorRequest

if TYPE_CHECKING:
    from src.application.ports.project_repository import ProjectRepositoryProtocol
    from src.application.ports.supervisor_request_repository import (
        SupervisorRequestRepositoryProtocol,
    )
    from src.application.ports.time_authority import TimeAuthorityProtocol
    from src.application.services.capacity_gate_service import CapacityGateService
    from src.application.services.notification_service import NotificationService

logger = get_logger(__name__)


class SupervisorRequestService:
    """Create, approve and deny supervisor requests."""

    def __init__(
        self,
        request_repo: SupervisorRequestRepositoryProtocol,
        project_repo: ProjectRepositoryProtocol,
        capacity_gate: CapacityGateService,
        time_authority: TimeAuthorityProtocol,
        notifications: NotificationService | None = None,
    ) -> None:
        self._requests = request_repo
        self._projects = project_repo
        self._capacity_gate = capacity_gate
        self._time = time_authority
        self._notifications = notifications

    async def create_request(
        self,
        project_id: UUID,
        supervisor_id: UUID,
        requested_by: UUID,
        message: str = "",
    ) -> SupervisorRequest:
        """Open a PENDING request.

        Raises:
            EntityNotFoundError: If the project does not exist.
            AlreadyExistsError: If a PENDING request already exists for
                this project and supervisor.
        """
        if await self._projects.get(project_id) is None:
            raise EntityNotFoundError("project", project_id)

        pending = await self._requests.find_pending(project_id, supervisor_id)
        if pending is not None:
            raise AlreadyExistsError(
                "supervisor_request",
                "a pending request already exists for this project and supervisor",
                existing_id=pending.id,
            )

        now = self._time.utcnow()
        request = SupervisorRequest(
            id=uuid4(),
            project_id=project_id,
            supervisor_id=supervisor_id,
            requested_by=requested_by,
            message=message.strip(),
            created_at=now,
            updated_at=now,
        )
        await self._requests.save(request)
        logger.info(
            "supervisor_request_created",
            request_id=str(request.id),
            project_id=str(project_id),
            supervisor_id=str(supervisor_id),
        )
        await self._notify(SUPERVISOR_REQUEST_CREATED_EVENT_TYPE, request)
        return request

    async def get_request(self, request_id: UUID) -> SupervisorRequest:
        request = await self._requests.get(request_id)
        if request is None:
            raise EntityNotFoundError("supervisor_request", request_id)
        return request

    async def list_for_supervisor(self, supervisor_id: UUID) -> list[SupervisorRequest]:
        return await self._requests.list_by_supervisor(supervisor_id)

    async def approve_request(self, request_id: UUID) -> SupervisorRequest:
        """PENDING -> APPROVED, reserving capacity and binding the project.

        Raises:
            InvalidTransitionError: If the request is not PENDING.
            CapacityExceededError: If the supervisor is at capacity.
            InvalidStateError: If the project already has another supervisor.
            ConcurrentModificationError: If the request or project changed
                concurrently. Capacity has been released again.
        """
        log = logger.bind(request_id=str(request_id))
        request = await self.get_request(request_id)
        now = self._time.utcnow()

        approved = request.approved(now)
        project = await self._projects.get(request.project_id)
        if project is None:
            raise EntityNotFoundError("project", request.project_id)
        bound = project.with_supervisor(request.supervisor_id, now)

        await self._capacity_gate.reserve(request.supervisor_id)
        try:
            stored = await self._requests.update(approved, request.version)
        except Exception:
            await self._capacity_gate.release(request.supervisor_id)
            log.warning("supervisor_request_approval_rolled_back", stage="request")
            raise

        if bound is not project:
            try:
                await self._projects.update(bound, project.version)
            except Exception:
                log.warning("supervisor_request_approval_rolled_back", stage="project")
                try:
                    # Put the request back so it can be approved again
                    await self._requests.update(request, stored.version)
                finally:
                    await self._capacity_gate.release(request.supervisor_id)
                raise

        log.info(
            "supervisor_request_approved",
            supervisor_id=str(request.supervisor_id),
            project_id=str(request.project_id),
        )
        await self._notify(SUPERVISOR_REQUEST_DECIDED_EVENT_TYPE, stored)
        return stored

    async def deny_request(self, request_id: UUID) -> SupervisorRequest:
        """PENDING -> DENIED."""
        request = await self.get_request(request_id)
        stored = await self._requests.update(
            request.denied(self._time.utcnow()), request.version
        )
        logger.info("supervisor_request_denied", request_id=str(request_id))
        await self._notify(SUPERVISOR_REQUEST_DECIDED_EVENT_TYPE, stored)
        return stored

    async def _notify(self, event_type: str, request: SupervisorRequest) -> None:
        if self._notifications is None:
            return
        await self._notifications.notify(
            CollaborationEvent(
                event_type=event_type,
                subject_id=request.id,
                occurred_at=request.updated_at,
                recipient_ids=(request.supervisor_id, request.requested_by),
                payload={
                    "project_id": str(request.project_id),
                    "status": request.status.value,
                },
            )
        )
