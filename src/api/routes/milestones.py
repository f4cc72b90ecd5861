"""Milestone, escrow and submission routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Response

from src.api.dependencies.collaboration import (
    get_milestone_escrow_service,
    get_submission_service,
)
from src.api.models.common import ErrorResponse
from src.api.models.milestone import (
    CreateMilestoneRequest,
    MilestoneResponse,
    PortfolioRetryResponse,
    RequestChangesRequest,
    SubmissionResponse,
    SubmitWorkRequest,
    UpdateMilestoneStatusRequest,
)
from src.application.services.milestone_escrow_service import MilestoneEscrowService
from src.application.services.submission_service import SubmissionService

router = APIRouter(tags=["milestones"])

_ERRORS = {
    400: {"model": ErrorResponse, "description": "Transition or escrow guard failed"},
    404: {"model": ErrorResponse, "description": "Milestone not found"},
    409: {"model": ErrorResponse, "description": "Conflict or subject under dispute"},
}

Service = MilestoneEscrowService


@router.post(
    "/v1/projects/{project_id}/milestones",
    response_model=MilestoneResponse,
    status_code=201,
    responses=_ERRORS,
)
async def create_milestone(
    project_id: UUID,
    body: CreateMilestoneRequest,
    service: Service = Depends(get_milestone_escrow_service),
) -> MilestoneResponse:
    """Create a PROPOSED milestone. The project needs an assigned application."""
    milestone = await service.create_milestone(
        project_id=project_id,
        title=body.title,
        amount=body.amount,
        currency=body.currency,
        scope=body.scope,
        acceptance_criteria=body.acceptance_criteria,
        due_date=body.due_date,
    )
    return MilestoneResponse.from_domain(milestone)


@router.get("/v1/projects/{project_id}/milestones", response_model=list[MilestoneResponse])
async def list_project_milestones(
    project_id: UUID,
    service: Service = Depends(get_milestone_escrow_service),
) -> list[MilestoneResponse]:
    milestones = await service.list_project_milestones(project_id)
    return [MilestoneResponse.from_domain(m) for m in milestones]


@router.get("/v1/milestones/{milestone_id}", response_model=MilestoneResponse, responses=_ERRORS)
async def get_milestone(
    milestone_id: UUID,
    service: Service = Depends(get_milestone_escrow_service),
) -> MilestoneResponse:
    return MilestoneResponse.from_domain(await service.get_milestone(milestone_id))


@router.delete("/v1/milestones/{milestone_id}", status_code=204, responses=_ERRORS)
async def delete_milestone(
    milestone_id: UUID,
    service: Service = Depends(get_milestone_escrow_service),
) -> Response:
    await service.delete_milestone(milestone_id)
    return Response(status_code=204)


@router.post(
    "/v1/milestones/{milestone_id}/status", response_model=MilestoneResponse, responses=_ERRORS
)
async def update_status(
    milestone_id: UUID,
    body: UpdateMilestoneStatusRequest,
    service: Service = Depends(get_milestone_escrow_service),
) -> MilestoneResponse:
    return MilestoneResponse.from_domain(await service.update_status(milestone_id, body.status))


@router.post(
    "/v1/milestones/{milestone_id}/fund", response_model=MilestoneResponse, responses=_ERRORS
)
async def fund_escrow(
    milestone_id: UUID,
    service: Service = Depends(get_milestone_escrow_service),
) -> MilestoneResponse:
    return MilestoneResponse.from_domain(await service.fund_escrow(milestone_id))


@router.post(
    "/v1/milestones/{milestone_id}/hold", response_model=MilestoneResponse, responses=_ERRORS
)
async def hold_escrow(
    milestone_id: UUID,
    service: Service = Depends(get_milestone_escrow_service),
) -> MilestoneResponse:
    return MilestoneResponse.from_domain(await service.hold_escrow(milestone_id))


@router.post(
    "/v1/milestones/{milestone_id}/approve-for-partner",
    response_model=MilestoneResponse,
    responses=_ERRORS,
)
async def approve_for_partner(
    milestone_id: UUID,
    service: Service = Depends(get_milestone_escrow_service),
) -> MilestoneResponse:
    return MilestoneResponse.from_domain(await service.approve_for_partner(milestone_id))


@router.post(
    "/v1/milestones/{milestone_id}/request-changes",
    response_model=MilestoneResponse,
    responses=_ERRORS,
)
async def request_changes(
    milestone_id: UUID,
    body: RequestChangesRequest,
    service: Service = Depends(get_milestone_escrow_service),
) -> MilestoneResponse:
    milestone = await service.request_changes(milestone_id, body.justification)
    return MilestoneResponse.from_domain(milestone)


@router.post(
    "/v1/milestones/{milestone_id}/release", response_model=MilestoneResponse, responses=_ERRORS
)
async def approve_and_release(
    milestone_id: UUID,
    service: Service = Depends(get_milestone_escrow_service),
) -> MilestoneResponse:
    """Release escrow. Portfolio entries are created in the background."""
    return MilestoneResponse.from_domain(await service.approve_and_release(milestone_id))


@router.post(
    "/v1/milestones/{milestone_id}/revert", response_model=MilestoneResponse, responses=_ERRORS
)
async def disapprove_and_revert(
    milestone_id: UUID,
    service: Service = Depends(get_milestone_escrow_service),
) -> MilestoneResponse:
    return MilestoneResponse.from_domain(await service.disapprove_and_revert(milestone_id))


@router.post(
    "/v1/milestones/{milestone_id}/complete", response_model=MilestoneResponse, responses=_ERRORS
)
async def mark_as_complete(
    milestone_id: UUID,
    service: Service = Depends(get_milestone_escrow_service),
) -> MilestoneResponse:
    return MilestoneResponse.from_domain(await service.mark_as_complete(milestone_id))


@router.post(
    "/v1/milestones/{milestone_id}/uncomplete",
    response_model=MilestoneResponse,
    responses=_ERRORS,
)
async def unmark_as_complete(
    milestone_id: UUID,
    service: Service = Depends(get_milestone_escrow_service),
) -> MilestoneResponse:
    return MilestoneResponse.from_domain(await service.unmark_as_complete(milestone_id))


@router.post(
    "/v1/milestones/{milestone_id}/portfolio/retry",
    response_model=PortfolioRetryResponse,
    responses=_ERRORS,
)
async def retry_portfolio(
    milestone_id: UUID,
    service: Service = Depends(get_milestone_escrow_service),
) -> PortfolioRetryResponse:
    return PortfolioRetryResponse(created=await service.retry_portfolio(milestone_id))


@router.post(
    "/v1/milestones/{milestone_id}/submissions",
    response_model=SubmissionResponse,
    status_code=201,
    responses=_ERRORS,
)
async def submit_work(
    milestone_id: UUID,
    body: SubmitWorkRequest,
    service: SubmissionService = Depends(get_submission_service),
) -> SubmissionResponse:
    """Deliver work; moves the milestone to SUBMITTED."""
    submission = await service.submit_work(
        milestone_id=milestone_id,
        student_id=body.student_id,
        files=[f.to_domain() for f in body.files],
        notes=body.notes,
    )
    return SubmissionResponse.from_domain(submission)


@router.get(
    "/v1/milestones/{milestone_id}/submissions", response_model=list[SubmissionResponse]
)
async def list_submissions(
    milestone_id: UUID,
    service: SubmissionService = Depends(get_submission_service),
) -> list[SubmissionResponse]:
    submissions = await service.list_submissions(milestone_id)
    return [SubmissionResponse.from_domain(s) for s in submissions]
