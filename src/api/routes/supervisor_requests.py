"""Supervisor request routes."""

from uuid import UUID

from fastapi import APIRouter, Depends

from src.api.dependencies.collaboration import get_supervisor_request_service
from src.api.models.common import ErrorResponse
from src.api.models.supervisor_request import (
    CreateSupervisorRequestRequest,
    SupervisorRequestResponse,
)
from src.application.services.supervisor_request_service import (
    SupervisorRequestService,
)

router = APIRouter(prefix="/v1/supervisor-requests", tags=["supervisor-requests"])

_ERRORS = {
    400: {"model": ErrorResponse, "description": "Request not pending or project bound"},
    404: {"model": ErrorResponse, "description": "Request or project not found"},
    409: {"model": ErrorResponse, "description": "Duplicate request or capacity exceeded"},
}


@router.post(
    "", response_model=SupervisorRequestResponse, status_code=201, responses=_ERRORS
)
async def create_request(
    body: CreateSupervisorRequestRequest,
    service: SupervisorRequestService = Depends(get_supervisor_request_service),
) -> SupervisorRequestResponse:
    request = await service.create_request(
        project_id=body.project_id,
        supervisor_id=body.supervisor_id,
        requested_by=body.requested_by,
        message=body.message,
    )
    return SupervisorRequestResponse.from_domain(request)


@router.get("", response_model=list[SupervisorRequestResponse])
async def list_for_supervisor(
    supervisor_id: UUID,
    service: SupervisorRequestService = Depends(get_supervisor_request_service),
) -> list[SupervisorRequestResponse]:
    requests = await service.list_for_supervisor(supervisor_id)
    return [SupervisorRequestResponse.from_domain(r) for r in requests]


@router.get("/{request_id}", response_model=SupervisorRequestResponse, responses=_ERRORS)
async def get_request(
    request_id: UUID,
    service: SupervisorRequestService = Depends(get_supervisor_request_service),
) -> SupervisorRequestResponse:
    return SupervisorRequestResponse.from_domain(await service.get_request(request_id))


@router.post(
    "/{request_id}/approve", response_model=SupervisorRequestResponse, responses=_ERRORS
)
async def approve_request(
    request_id: UUID,
    service: SupervisorRequestService = Depends(get_supervisor_request_service),
) -> SupervisorRequestResponse:
    """Approve, reserve capacity and bind the supervisor to the project."""
    return SupervisorRequestResponse.from_domain(await service.approve_request(request_id))


@router.post(
    "/{request_id}/deny", response_model=SupervisorRequestResponse, responses=_ERRORS
)
async def deny_request(
    request_id: UUID,
    service: SupervisorRequestService = Depends(get_supervisor_request_service),
) -> SupervisorRequestResponse:
    return SupervisorRequestResponse.from_domain(await service.deny_request(request_id))
