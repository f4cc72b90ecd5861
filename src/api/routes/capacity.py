"""Supervisor capacity routes."""

from uuid import UUID

from fastapi import APIRouter, Depends

from src.api.dependencies.collaboration import get_capacity_gate_service
from src.api.models.capacity import CapacityResponse, SetCapacityRequest
from src.api.models.common import ErrorResponse
from src.application.services.capacity_gate_service import CapacityGateService

router = APIRouter(prefix="/v1/supervisors/{supervisor_id}/capacity", tags=["capacity"])


@router.get("", response_model=CapacityResponse)
async def query_capacity(
    supervisor_id: UUID,
    service: CapacityGateService = Depends(get_capacity_gate_service),
) -> CapacityResponse:
    return CapacityResponse.from_domain(await service.query(supervisor_id))


@router.put(
    "",
    response_model=CapacityResponse,
    responses={422: {"model": ErrorResponse, "description": "Below active assignments"}},
)
async def set_max_active(
    supervisor_id: UUID,
    body: SetCapacityRequest,
    service: CapacityGateService = Depends(get_capacity_gate_service),
) -> CapacityResponse:
    capacity = await service.set_max_active(supervisor_id, body.max_active)
    return CapacityResponse.from_domain(capacity)


@router.post(
    "/reserve",
    response_model=CapacityResponse,
    responses={409: {"model": ErrorResponse, "description": "Supervisor at capacity"}},
)
async def reserve(
    supervisor_id: UUID,
    service: CapacityGateService = Depends(get_capacity_gate_service),
) -> CapacityResponse:
    return CapacityResponse.from_domain(await service.reserve(supervisor_id))


@router.post("/release", response_model=CapacityResponse)
async def release(
    supervisor_id: UUID,
    service: CapacityGateService = Depends(get_capacity_gate_service),
) -> CapacityResponse:
    """Free one slot when an assignment ends outside the workflows."""
    return CapacityResponse.from_domain(await service.release(supervisor_id))
