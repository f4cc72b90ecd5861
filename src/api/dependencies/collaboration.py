"""Service providers for the collaboration routes.

Every provider reads the process-wide container from
``src.bootstrap.container``. Tests install their own container with
``set_container`` or override a provider through
``app.dependency_overrides``.
"""

from src.application.services.application_workflow_service import (
    ApplicationWorkflowService,
)
from src.application.services.capacity_gate_service import CapacityGateService
from src.application.services.dispute_escalation_service import (
    DisputeEscalationService,
)
from src.application.services.milestone_escrow_service import MilestoneEscrowService
from src.application.services.portfolio_auto_creation_service import (
    PortfolioAutoCreationService,
)
from src.application.services.reference_data_service import ReferenceDataService
from src.application.services.submission_service import SubmissionService
from src.application.services.supervisor_request_service import (
    SupervisorRequestService,
)
from src.bootstrap.container import get_container


def get_application_workflow_service() -> ApplicationWorkflowService:
    return get_container().applications


def get_milestone_escrow_service() -> MilestoneEscrowService:
    return get_container().milestones


def get_submission_service() -> SubmissionService:
    return get_container().submissions


def get_dispute_escalation_service() -> DisputeEscalationService:
    return get_container().disputes


def get_capacity_gate_service() -> CapacityGateService:
    return get_container().capacity


def get_supervisor_request_service() -> SupervisorRequestService:
    return get_container().supervisor_requests


def get_portfolio_service() -> PortfolioAutoCreationService:
    return get_container().portfolio


def get_reference_data_service() -> ReferenceDataService:
    return get_container().reference_data
