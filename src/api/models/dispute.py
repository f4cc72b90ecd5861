"""Dispute API request/response models."""

from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, Field

from src.api.models.common import DateTimeWithZ
from src.domain.models.dispute import (
    Dispute,
    DisputeLevel,
    DisputeStatus,
    DisputeSubjectType,
)


class CreateDisputeRequest(BaseModel):
    """Open a dispute on a milestone, application or project.

    Text limits are enforced by the service so every caller gets the
    same VALIDATION_ERROR body.
    """

    subject_type: DisputeSubjectType
    subject_id: UUID
    reason: str
    description: str
    raised_by: UUID
    evidence: list[str] = Field(default_factory=list)


class ResolveDisputeRequest(BaseModel):
    resolution: str


class DisputeResponse(BaseModel):
    id: UUID
    subject_type: DisputeSubjectType
    subject_id: UUID
    reason: str
    description: str
    raised_by: UUID
    evidence: list[str]
    level: DisputeLevel
    status: DisputeStatus
    resolution: str | None
    resolved_at: DateTimeWithZ | None
    version: int
    created_at: DateTimeWithZ
    updated_at: DateTimeWithZ

    @classmethod
    def from_domain(cls, dispute: Dispute) -> DisputeResponse:
        return cls(
            id=dispute.id,
            subject_type=dispute.subject_type,
            subject_id=dispute.subject_id,
            reason=dispute.reason,
            description=dispute.description,
            raised_by=dispute.raised_by,
            evidence=list(dispute.evidence),
            level=dispute.level,
            status=dispute.status,
            resolution=dispute.resolution,
            resolved_at=dispute.resolved_at,
            version=dispute.version,
            created_at=dispute.created_at,
            updated_at=dispute.updated_at,
        )
