"""Application ports - Abstract interfaces for infrastructure adapters.

This module defines the contracts that infrastructure adapters must implement.
Ports enable dependency inversion and make the application layer testable.

Available ports:
- Repository protocols for applications, projects, milestones,
  submissions, disputes, portfolio entries and supervisor requests
- SupervisorCapacityStoreProtocol: atomic capacity accounting
- GroupDirectoryProtocol: student group membership lookup
- NotificationDispatcherProtocol: best-effort event delivery
- TimeAuthorityProtocol: injectable clock
"""

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

__all__: list[str] = [
    "ApplicationRepositoryProtocol",
    "DisputeRepositoryProtocol",
    "GroupDirectoryProtocol",
    "MilestoneRepositoryProtocol",
    "NotificationDispatcherProtocol",
    "PortfolioRepositoryProtocol",
    "ProjectRepositoryProtocol",
    "SubmissionRepositoryProtocol",
    "SupervisorCapacityStoreProtocol",
    "SupervisorRequestRepositoryProtocol",
    "TimeAuthorityProtocol",
]
