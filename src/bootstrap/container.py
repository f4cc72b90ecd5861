"""Composition root for the collaboration engine.

``build_container`` wires every service against one storage backend.
The API reads the process-wide container through ``get_container``;
tests install their own with ``set_container``.

Usage:
    container = build_container(StorageConfig(), WorkflowConfig())
    application = await container.applications.submit_application(...)
"""

from __future__ import annotations

from dataclasses import dataclass

from structlog import get_logger

from src.application.ports.application_repository import (
    ApplicationRepositoryProtocol,
)
from src.application.ports.dispute_repository import DisputeRepositoryProtocol
from src.application.ports.group_directory import GroupDirectoryProtocol
from src.application.ports.milestone_repository import MilestoneRepositoryProtocol
from src.application.ports.notification_dispatcher import (
    NotificationDispatcherProtocol,
)
from src.application.ports.portfolio_repository import PortfolioRepositoryProtocol
from src.application.ports.project_repository import ProjectRepositoryProtocol
from src.application.ports.submission_repository import (
    SubmissionRepositoryProtocol,
)
from src.application.ports.supervisor_capacity_store import (
    SupervisorCapacityStoreProtocol,
)
from src.application.ports.supervisor_request_repository import (
    SupervisorRequestRepositoryProtocol,
)
from src.application.ports.time_authority import TimeAuthorityProtocol
from src.application.services.application_workflow_service import (
    ApplicationWorkflowService,
)
from src.application.services.capacity_gate_service import CapacityGateService
from src.application.services.dispute_escalation_service import (
    DisputeEscalationService,
)
from src.application.services.dispute_guard import DisputeGuard
from src.application.services.milestone_escrow_service import MilestoneEscrowService
from src.application.services.notification_service import NotificationService
from src.application.services.portfolio_auto_creation_service import (
    PortfolioAutoCreationService,
)
from src.application.services.reference_data_service import ReferenceDataService
from src.application.services.submission_service import SubmissionService
from src.application.services.supervisor_request_service import (
    SupervisorRequestService,
)
from src.config.storage_config import StorageBackend, StorageConfig
from src.config.workflow_config import WorkflowConfig
from src.infrastructure.adapters.notifications import LogNotificationDispatcher
from src.infrastructure.adapters.time import SystemTimeAuthority

logger = get_logger(__name__)


@dataclass(frozen=True)
class Repositories:
    """One storage adapter per port."""

    applications: ApplicationRepositoryProtocol
    projects: ProjectRepositoryProtocol
    milestones: MilestoneRepositoryProtocol
    submissions: SubmissionRepositoryProtocol
    disputes: DisputeRepositoryProtocol
    portfolio: PortfolioRepositoryProtocol
    capacity: SupervisorCapacityStoreProtocol
    supervisor_requests: SupervisorRequestRepositoryProtocol
    groups: GroupDirectoryProtocol


@dataclass(frozen=True)
class CollaborationContainer:
    """Every service of the engine, wired against one set of repositories."""

    repositories: Repositories
    time_authority: TimeAuthorityProtocol
    config: WorkflowConfig
    capacity: CapacityGateService
    applications: ApplicationWorkflowService
    milestones: MilestoneEscrowService
    submissions: SubmissionService
    disputes: DisputeEscalationService
    portfolio: PortfolioAutoCreationService
    supervisor_requests: SupervisorRequestService
    reference_data: ReferenceDataService
    notifications: NotificationService


def memory_repositories() -> Repositories:
    """In-memory stubs (development and tests)."""
    from src.infrastructure.stubs import (
        ApplicationRepositoryStub,
        DisputeRepositoryStub,
        GroupDirectoryStub,
        MilestoneRepositoryStub,
        PortfolioRepositoryStub,
        ProjectRepositoryStub,
        SubmissionRepositoryStub,
        SupervisorCapacityStoreStub,
        SupervisorRequestRepositoryStub,
    )

    return Repositories(
        applications=ApplicationRepositoryStub(),
        projects=ProjectRepositoryStub(),
        milestones=MilestoneRepositoryStub(),
        submissions=SubmissionRepositoryStub(),
        disputes=DisputeRepositoryStub(),
        portfolio=PortfolioRepositoryStub(),
        capacity=SupervisorCapacityStoreStub(),
        supervisor_requests=SupervisorRequestRepositoryStub(),
        groups=GroupDirectoryStub(),
    )


def postgres_repositories(database_url: str | None = None) -> Repositories:
    """PostgreSQL adapters sharing one session factory."""
    from src.bootstrap.database import get_session_factory
    from src.infrastructure.adapters.persistence import (
        PostgresApplicationRepository,
        PostgresDisputeRepository,
        PostgresGroupDirectory,
        PostgresMilestoneRepository,
        PostgresPortfolioRepository,
        PostgresProjectRepository,
        PostgresSubmissionRepository,
        PostgresSupervisorCapacityStore,
        PostgresSupervisorRequestRepository,
    )

    session_factory = get_session_factory(database_url)
    return Repositories(
        applications=PostgresApplicationRepository(session_factory),
        projects=PostgresProjectRepository(session_factory),
        milestones=PostgresMilestoneRepository(session_factory),
        submissions=PostgresSubmissionRepository(session_factory),
        disputes=PostgresDisputeRepository(session_factory),
        portfolio=PostgresPortfolioRepository(session_factory),
        capacity=PostgresSupervisorCapacityStore(session_factory),
        supervisor_requests=PostgresSupervisorRequestRepository(session_factory),
        groups=PostgresGroupDirectory(session_factory),
    )


def wire_services(
    repositories: Repositories,
    config: WorkflowConfig,
    time_authority: TimeAuthorityProtocol | None = None,
    dispatcher: NotificationDispatcherProtocol | None = None,
) -> CollaborationContainer:
    """Build every service on top of the given repositories."""
    clock = time_authority or SystemTimeAuthority()
    notifications = NotificationService(dispatcher)
    guard = DisputeGuard(repositories.disputes, enabled=config.suspend_on_open_dispute)
    capacity = CapacityGateService(repositories.capacity, config)

    applications = ApplicationWorkflowService(
        application_repo=repositories.applications,
        project_repo=repositories.projects,
        capacity_gate=capacity,
        time_authority=clock,
        group_directory=repositories.groups,
        dispute_guard=guard,
        notifications=notifications,
        config=config,
    )
    portfolio = PortfolioAutoCreationService(
        portfolio_repo=repositories.portfolio,
        milestone_repo=repositories.milestones,
        application_repo=repositories.applications,
        time_authority=clock,
        config=config,
    )
    milestones = MilestoneEscrowService(
        milestone_repo=repositories.milestones,
        project_repo=repositories.projects,
        application_repo=repositories.applications,
        time_authority=clock,
        portfolio=portfolio,
        dispute_guard=guard,
        notifications=notifications,
        config=config,
    )
    submissions = SubmissionService(
        submission_repo=repositories.submissions,
        milestone_repo=repositories.milestones,
        application_repo=repositories.applications,
        time_authority=clock,
        dispute_guard=guard,
        notifications=notifications,
        config=config,
    )
    disputes = DisputeEscalationService(
        dispute_repo=repositories.disputes,
        milestone_repo=repositories.milestones,
        project_repo=repositories.projects,
        application_workflow=applications,
        time_authority=clock,
        notifications=notifications,
    )
    supervisor_requests = SupervisorRequestService(
        request_repo=repositories.supervisor_requests,
        project_repo=repositories.projects,
        capacity_gate=capacity,
        time_authority=clock,
        notifications=notifications,
    )
    reference_data = ReferenceDataService(
        project_repo=repositories.projects,
        group_directory=repositories.groups,
        time_authority=clock,
    )

    return CollaborationContainer(
        repositories=repositories,
        time_authority=clock,
        config=config,
        capacity=capacity,
        applications=applications,
        milestones=milestones,
        submissions=submissions,
        disputes=disputes,
        portfolio=portfolio,
        supervisor_requests=supervisor_requests,
        reference_data=reference_data,
        notifications=notifications,
    )


def build_container(
    storage: StorageConfig | None = None,
    workflow: WorkflowConfig | None = None,
    time_authority: TimeAuthorityProtocol | None = None,
    dispatcher: NotificationDispatcherProtocol | None = None,
) -> CollaborationContainer:
    """Build a container for the configured backend.

    Args:
        storage: Backend selection; read from the environment when omitted.
        workflow: Workflow limits; read from the environment when omitted.
        time_authority: Clock override, system time by default.
        dispatcher: Notification dispatcher, log-only by default.
    """
    storage = storage or StorageConfig.from_environment()
    workflow = workflow or WorkflowConfig.from_environment()

    if storage.backend == StorageBackend.POSTGRES:
        repositories = postgres_repositories(storage.database_url)
    else:
        repositories = memory_repositories()

    logger.info(
        "collaboration_container_built",
        backend=storage.backend.value,
        suspend_on_open_dispute=workflow.suspend_on_open_dispute,
    )
    return wire_services(
        repositories,
        workflow,
        time_authority=time_authority,
        dispatcher=dispatcher or LogNotificationDispatcher(),
    )


_container: CollaborationContainer | None = None


def get_container() -> CollaborationContainer:
    """Get the process-wide container, building it from the environment."""
    global _container
    if _container is None:
        _container = build_container()
    return _container


def set_container(container: CollaborationContainer) -> None:
    """Set a custom container for testing."""
    global _container
    _container = container


def reset_container() -> None:
    """Reset the container singleton for testing."""
    global _container
    _container = None
