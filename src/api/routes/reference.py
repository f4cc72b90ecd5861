"""Project and student group registration routes."""

from uuid import UUID

from fastapi import APIRouter, Depends

from src.api.dependencies.collaboration import get_reference_data_service
from src.api.models.common import ErrorResponse
from src.api.models.reference import (
    GroupResponse,
    ProjectResponse,
    RegisterGroupRequest,
    RegisterProjectRequest,
)
from src.application.services.reference_data_service import ReferenceDataService

router = APIRouter(prefix="/v1", tags=["reference-data"])

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Not found"}}


@router.post("/projects", response_model=ProjectResponse, status_code=201)
async def register_project(
    body: RegisterProjectRequest,
    service: ReferenceDataService = Depends(get_reference_data_service),
) -> ProjectResponse:
    project = await service.register_project(
        partner_id=body.partner_id,
        title=body.title,
        status=body.status,
        university_id=body.university_id,
        budget=body.budget,
        currency=body.currency,
    )
    return ProjectResponse.from_domain(project)


@router.get("/projects/{project_id}", response_model=ProjectResponse, responses=_NOT_FOUND)
async def get_project(
    project_id: UUID,
    service: ReferenceDataService = Depends(get_reference_data_service),
) -> ProjectResponse:
    return ProjectResponse.from_domain(await service.get_project(project_id))


@router.post("/groups", response_model=GroupResponse, status_code=201)
async def register_group(
    body: RegisterGroupRequest,
    service: ReferenceDataService = Depends(get_reference_data_service),
) -> GroupResponse:
    group = await service.register_group(body.name, body.member_ids, body.leader_id)
    return GroupResponse.from_domain(group)


@router.get("/groups/{group_id}", response_model=GroupResponse, responses=_NOT_FOUND)
async def get_group(
    group_id: UUID,
    service: ReferenceDataService = Depends(get_reference_data_service),
) -> GroupResponse:
    return GroupResponse.from_domain(await service.get_group(group_id))
