"""PostgreSQL persistence adapters (SQLAlchemy async + asyncpg)."""

from src.infrastructure.adapters.persistence.application_repository import (
    PostgresApplicationRepository,
)
from src.infrastructure.adapters.persistence.dispute_repository import (
    PostgresDisputeRepository,
)
from src.infrastructure.adapters.persistence.group_directory import (
    PostgresGroupDirectory,
)
from src.infrastructure.adapters.persistence.milestone_repository import (
    PostgresMilestoneRepository,
)
from src.infrastructure.adapters.persistence.portfolio_repository import (
    PostgresPortfolioRepository,
)
from src.infrastructure.adapters.persistence.project_repository import (
    PostgresProjectRepository,
)
from src.infrastructure.adapters.persistence.schema import create_schema
from src.infrastructure.adapters.persistence.submission_repository import (
    PostgresSubmissionRepository,
)
from src.infrastructure.adapters.persistence.supervisor_capacity_store import (
    PostgresSupervisorCapacityStore,
)
from src.infrastructure.adapters.persistence.supervisor_request_repository import (
    PostgresSupervisorRequestRepository,
)

__all__: list[str] = [
    "PostgresApplicationRepository",
    "PostgresDisputeRepository",
    "PostgresGroupDirectory",
    "PostgresMilestoneRepository",
    "PostgresPortfolioRepository",
    "PostgresProjectRepository",
    "PostgresSubmissionRepository",
    "PostgresSupervisorCapacityStore",
    "PostgresSupervisorRequestRepository",
    "create_schema",
]
