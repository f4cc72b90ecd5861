"""Supervisor capacity API models."""

from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, Field

from src.domain.models.supervisor_capacity import SupervisorCapacity


class SetCapacityRequest(BaseModel):
    max_active: int = Field(..., ge=0, description="New maximum concurrent assignments")


class CapacityResponse(BaseModel):
    supervisor_id: UUID
    current: int = Field(..., description="Active assignments")
    max: int = Field(..., description="Maximum active assignments")
    available: int

    @classmethod
    def from_domain(cls, capacity: SupervisorCapacity) -> CapacityResponse:
        return cls(
            supervisor_id=capacity.supervisor_id,
            current=capacity.current_active,
            max=capacity.max_active,
            available=capacity.available,
        )
