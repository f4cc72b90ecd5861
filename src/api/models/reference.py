"""Project and student group registration models."""

from __future__ import annotations

from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from src.domain.models.group import StudentGroup
from src.domain.models.project import Project, ProjectStatus


class RegisterProjectRequest(BaseModel):
    partner_id: UUID
    title: str = Field(..., min_length=1, max_length=200)
    status: ProjectStatus = ProjectStatus.PUBLISHED
    university_id: UUID | None = None
    budget: Decimal | None = Field(default=None, ge=0)
    currency: str = Field(default="USD", min_length=3, max_length=3)


class ProjectResponse(BaseModel):
    id: UUID
    partner_id: UUID
    title: str
    status: ProjectStatus
    university_id: UUID | None
    budget: Decimal | None
    currency: str
    supervisor_id: UUID | None
    version: int

    @classmethod
    def from_domain(cls, project: Project) -> ProjectResponse:
        return cls(
            id=project.id,
            partner_id=project.partner_id,
            title=project.title,
            status=project.status,
            university_id=project.university_id,
            budget=project.budget,
            currency=project.currency,
            supervisor_id=project.supervisor_id,
            version=project.version,
        )


class RegisterGroupRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    member_ids: list[UUID] = Field(..., min_length=1)
    leader_id: UUID | None = None


class GroupResponse(BaseModel):
    id: UUID
    name: str
    member_ids: list[UUID]
    leader_id: UUID | None

    @classmethod
    def from_domain(cls, group: StudentGroup) -> GroupResponse:
        return cls(
            id=group.id,
            name=group.name,
            member_ids=list(group.member_ids),
            leader_id=group.leader_id,
        )
