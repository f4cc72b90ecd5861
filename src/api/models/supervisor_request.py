"""Supervisor request API models."""

from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, Field

from src.api.models.common import DateTimeWithZ
from src.domain.models.supervisor_request import (
    SupervisorRequest,
    SupervisorRequestStatus,
)


class CreateSupervisorRequestRequest(BaseModel):
    project_id: UUID
    supervisor_id: UUID
    requested_by: UUID
    message: str = Field(default="", max_length=2000)


class SupervisorRequestResponse(BaseModel):
    id: UUID
    project_id: UUID
    supervisor_id: UUID
    requested_by: UUID
    message: str
    status: SupervisorRequestStatus
    decided_at: DateTimeWithZ | None
    version: int
    created_at: DateTimeWithZ

    @classmethod
    def from_domain(cls, request: SupervisorRequest) -> SupervisorRequestResponse:
        return cls(
            id=request.id,
            project_id=request.project_id,
            supervisor_id=request.supervisor_id,
            requested_by=request.requested_by,
            message=request.message,
            status=request.status,
            decided_at=request.decided_at,
            version=request.version,
            created_at=request.created_at,
        )
