"""Application services - Use case orchestration.

This module contains application services that drive the collaboration
state machines and coordinate with infrastructure adapters.

Available services:
- CapacityGateService: Supervisor admission control
- ApplicationWorkflowService: Application lifecycle and lazy offer expiry
- MilestoneEscrowService: Milestone status and escrow state machine
- SubmissionService: Work delivery against milestones
- DisputeEscalationService: Dispute ladder
- DisputeGuard: Suspension of disputed subjects
- PortfolioAutoCreationService: Best-effort portfolio side effect
- SupervisorRequestService: Supervisor requests and project binding
- NotificationService: Best-effort notification fan-out
- ReferenceDataService: Project and student group registration
"""

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

__all__: list[str] = [
    "ApplicationWorkflowService",
    "CapacityGateService",
    "DisputeEscalationService",
    "DisputeGuard",
    "MilestoneEscrowService",
    "NotificationService",
    "PortfolioAutoCreationService",
    "ReferenceDataService",
    "SubmissionService",
    "SupervisorRequestService",
]
