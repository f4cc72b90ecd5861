"""Application workflow API request/response models."""

from __future__ import annotations

from uuid import UUID

from pydantic import AwareDatetime, BaseModel, Field

from src.api.models.common import DateTimeWithZ
from src.domain.models.application import (
    ApplicantType,
    Application,
    ApplicationStatus,
)


class SubmitApplicationRequest(BaseModel):
    """Request to apply to a project.

    Attributes:
        project_id: Project applied to.
        applicant_type: INDIVIDUAL or GROUP.
        submitted_by: Submitting student (a member for GROUP).
        statement: Motivation statement, HTML is stripped.
        group_id: Required for GROUP applications.
    """

    project_id: UUID
    applicant_type: ApplicantType
    submitted_by: UUID
    statement: str = Field(..., max_length=10000)
    group_id: UUID | None = None


class ScoreRequest(BaseModel):
    score: int = Field(..., ge=0, le=100, description="Screening score (0-100)")


class MakeOfferRequest(BaseModel):
    """Offer parameters; both fields are optional."""

    expires_at: AwareDatetime | None = Field(
        default=None, description="Offer deadline with a UTC offset, defaults to the configured validity"
    )
    supervisor_id: UUID | None = Field(
        default=None, description="Supervisor to bind on acceptance"
    )


class ApplicationResponse(BaseModel):
    id: UUID
    project_id: UUID
    applicant_type: ApplicantType
    student_ids: list[UUID]
    group_id: UUID | None
    statement: str
    status: ApplicationStatus
    score: int | None
    offer_expires_at: DateTimeWithZ | None
    supervisor_id: UUID | None
    version: int
    created_at: DateTimeWithZ
    updated_at: DateTimeWithZ

    @classmethod
    def from_domain(cls, application: Application) -> ApplicationResponse:
        return cls(
            id=application.id,
            project_id=application.project_id,
            applicant_type=application.applicant_type,
            student_ids=list(application.student_ids),
            group_id=application.group_id,
            statement=application.statement,
            status=application.status,
            score=application.score,
            offer_expires_at=application.offer_expires_at,
            supervisor_id=application.supervisor_id,
            version=application.version,
            created_at=application.created_at,
            updated_at=application.updated_at,
        )


class SweepResponse(BaseModel):
    expired: int = Field(..., description="Offers declined by this sweep")
