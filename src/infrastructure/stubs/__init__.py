"""Infrastructure stubs for development and testing.

This module provides in-memory implementations of the application
ports. Repository stubs simulate versioned compare-and-swap writes
under an asyncio lock.

Available stubs:
- ApplicationRepositoryStub, ProjectRepositoryStub, MilestoneRepositoryStub,
  DisputeRepositoryStub, SupervisorRequestRepositoryStub: versioned stores
- SubmissionRepositoryStub: append-only submission log
- PortfolioRepositoryStub: idempotent entries, injectable failures
- SupervisorCapacityStoreStub: atomic reserve/release
- GroupDirectoryStub: seeded student groups
- NotificationDispatcherStub: records events, injectable failures

WARNING: These stubs are NOT for production use.
Production implementations are in src/infrastructure/adapters/.
"""

from src.infrastructure.stubs.application_repository_stub import (
    ApplicationRepositoryStub,
)
from src.infrastructure.stubs.dispute_repository_stub import DisputeRepositoryStub
from src.infrastructure.stubs.group_directory_stub import GroupDirectoryStub
from src.infrastructure.stubs.milestone_repository_stub import (
    MilestoneRepositoryStub,
)
from src.infrastructure.stubs.notification_dispatcher_stub import (
    NotificationDispatcherStub,
)
from src.infrastructure.stubs.portfolio_repository_stub import (
    PortfolioRepositoryStub,
)
from src.infrastructure.stubs.project_repository_stub import ProjectRepositoryStub
from src.infrastructure.stubs.submission_repository_stub import (
    SubmissionRepositoryStub,
)
from src.infrastructure.stubs.supervisor_capacity_store_stub import (
    SupervisorCapacityStoreStub,
)
from src.infrastructure.stubs.supervisor_request_repository_stub import (
    SupervisorRequestRepositoryStub,
)

__all__: list[str] = [
    "ApplicationRepositoryStub",
    "DisputeRepositoryStub",
    "GroupDirectoryStub",
    "MilestoneRepositoryStub",
    "NotificationDispatcherStub",
    "PortfolioRepositoryStub",
    "ProjectRepositoryStub",
    "SubmissionRepositoryStub",
    "SupervisorCapacityStoreStub",
    "SupervisorRequestRepositoryStub",
]
