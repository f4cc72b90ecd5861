"""Domain models for the collaboration lifecycle engine."""

from src.domain.models.application import (
    Application,
    ApplicantType,
    ApplicationStatus,
)
from src.domain.models.dispute import (
    Dispute,
    DisputeLevel,
    DisputeStatus,
    DisputeSubjectType,
)
from src.domain.models.group import StudentGroup
from src.domain.models.milestone import EscrowStatus, Milestone, MilestoneStatus
from src.domain.models.portfolio import Complexity, PortfolioEntry
from src.domain.models.project import Project, ProjectStatus
from src.domain.models.submission import Submission, SubmittedFile
from src.domain.models.supervisor_capacity import SupervisorCapacity
from src.domain.models.supervisor_request import (
    SupervisorRequest,
    SupervisorRequestStatus,
)

__all__: list[str] = [
    "ApplicantType",
    "Application",
    "ApplicationStatus",
    "Complexity",
    "Dispute",
    "DisputeLevel",
    "DisputeStatus",
    "DisputeSubjectType",
    "EscrowStatus",
    "Milestone",
    "MilestoneStatus",
    "PortfolioEntry",
    "Project",
    "ProjectStatus",
    "StudentGroup",
    "Submission",
    "SubmittedFile",
    "SupervisorCapacity",
    "SupervisorRequest",
    "SupervisorRequestStatus",
]
