"""Milestone, escrow and submission API request/response models."""

from __future__ import annotations

from decimal import Decimal
from uuid import UUID

from pydantic import AwareDatetime, BaseModel, Field

from src.api.models.common import DateTimeWithZ
from src.domain.models.milestone import EscrowStatus, Milestone, MilestoneStatus
from src.domain.models.submission import Submission, SubmittedFile


class CreateMilestoneRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    amount: Decimal = Field(..., gt=0)
    currency: str = Field(default="USD", min_length=3, max_length=3)
    scope: str = ""
    acceptance_criteria: str = ""
    due_date: AwareDatetime | None = None


class UpdateMilestoneStatusRequest(BaseModel):
    """Generic status move: FINALIZED, IN_PROGRESS or SUPERVISOR_REVIEW."""

    status: MilestoneStatus


class RequestChangesRequest(BaseModel):
    justification: str = Field(..., description="Why the delivery needs changes")


class MilestoneResponse(BaseModel):
    id: UUID
    project_id: UUID
    title: str
    amount: Decimal
    currency: str
    scope: str
    acceptance_criteria: str
    due_date: DateTimeWithZ | None
    status: MilestoneStatus
    escrow_status: EscrowStatus
    supervisor_gate: bool
    change_request_reason: str | None
    version: int
    created_at: DateTimeWithZ
    updated_at: DateTimeWithZ

    @classmethod
    def from_domain(cls, milestone: Milestone) -> MilestoneResponse:
        return cls(
            id=milestone.id,
            project_id=milestone.project_id,
            title=milestone.title,
            amount=milestone.amount,
            currency=milestone.currency,
            scope=milestone.scope,
            acceptance_criteria=milestone.acceptance_criteria,
            due_date=milestone.due_date,
            status=milestone.status,
            escrow_status=milestone.escrow_status,
            supervisor_gate=milestone.supervisor_gate,
            change_request_reason=milestone.change_request_reason,
            version=milestone.version,
            created_at=milestone.created_at,
            updated_at=milestone.updated_at,
        )


class PortfolioRetryResponse(BaseModel):
    created: int = Field(..., description="Portfolio entries created by the retry")


class SubmittedFileModel(BaseModel):
    name: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)
    size_bytes: int | None = Field(default=None, ge=0)

    def to_domain(self) -> SubmittedFile:
        return SubmittedFile(name=self.name, url=self.url, size_bytes=self.size_bytes)


class SubmitWorkRequest(BaseModel):
    """Delivery of work against an IN_PROGRESS milestone."""

    student_id: UUID
    files: list[SubmittedFileModel]
    notes: str


class SubmissionResponse(BaseModel):
    id: UUID
    milestone_id: UUID
    student_id: UUID
    files: list[SubmittedFileModel]
    notes: str
    created_at: DateTimeWithZ

    @classmethod
    def from_domain(cls, submission: Submission) -> SubmissionResponse:
        return cls(
            id=submission.id,
            milestone_id=submission.milestone_id,
            student_id=submission.student_id,
            files=[
                SubmittedFileModel(name=f.name, url=f.url, size_bytes=f.size_bytes)
                for f in submission.files
            ],
            notes=submission.notes,
            created_at=submission.created_at,
        )
