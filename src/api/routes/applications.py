"""Application workflow routes.

Thin wrappers over ApplicationWorkflowService. Domain errors propagate
to the handler in ``src.api.errors``.
"""

from uuid import UUID

from fastapi import APIRouter, Depends

from src.api.dependencies.collaboration import get_application_workflow_service
from src.api.models.application import (
    ApplicationResponse,
    MakeOfferRequest,
    ScoreRequest,
    SubmitApplicationRequest,
    SweepResponse,
)
from src.api.models.common import ErrorResponse
from src.application.services.application_workflow_service import (
    ApplicationWorkflowService,
)

router = APIRouter(prefix="/v1/applications", tags=["applications"])

_ERRORS = {
    400: {"model": ErrorResponse, "description": "Transition not legal"},
    404: {"model": ErrorResponse, "description": "Application not found"},
    409: {"model": ErrorResponse, "description": "Conflict or subject under dispute"},
}


@router.post("", response_model=ApplicationResponse, status_code=201, responses=_ERRORS)
async def submit_application(
    body: SubmitApplicationRequest,
    service: ApplicationWorkflowService = Depends(get_application_workflow_service),
) -> ApplicationResponse:
    """Submit an application, reactivating a closed one for the same students."""
    application = await service.submit_application(
        project_id=body.project_id,
        applicant_type=body.applicant_type,
        submitted_by=body.submitted_by,
        statement=body.statement,
        group_id=body.group_id,
    )
    return ApplicationResponse.from_domain(application)


@router.post("/sweep-expired-offers", response_model=SweepResponse)
async def sweep_expired_offers(
    service: ApplicationWorkflowService = Depends(get_application_workflow_service),
) -> SweepResponse:
    """Decline every OFFERED application past its deadline (cron hook)."""
    return SweepResponse(expired=await service.sweep_expired_offers())


@router.get("/{application_id}", response_model=ApplicationResponse, responses=_ERRORS)
async def get_application(
    application_id: UUID,
    service: ApplicationWorkflowService = Depends(get_application_workflow_service),
) -> ApplicationResponse:
    return ApplicationResponse.from_domain(await service.get_application(application_id))


@router.get("", response_model=list[ApplicationResponse])
async def list_project_applications(
    project_id: UUID,
    service: ApplicationWorkflowService = Depends(get_application_workflow_service),
) -> list[ApplicationResponse]:
    applications = await service.list_project_applications(project_id)
    return [ApplicationResponse.from_domain(a) for a in applications]


@router.post(
    "/{application_id}/shortlist", response_model=ApplicationResponse, responses=_ERRORS
)
async def shortlist(
    application_id: UUID,
    service: ApplicationWorkflowService = Depends(get_application_workflow_service),
) -> ApplicationResponse:
    return ApplicationResponse.from_domain(await service.shortlist(application_id))


@router.post(
    "/{application_id}/waitlist", response_model=ApplicationResponse, responses=_ERRORS
)
async def waitlist(
    application_id: UUID,
    service: ApplicationWorkflowService = Depends(get_application_workflow_service),
) -> ApplicationResponse:
    return ApplicationResponse.from_domain(await service.waitlist(application_id))


@router.post("/{application_id}/reject", response_model=ApplicationResponse, responses=_ERRORS)
async def reject(
    application_id: UUID,
    service: ApplicationWorkflowService = Depends(get_application_workflow_service),
) -> ApplicationResponse:
    return ApplicationResponse.from_domain(await service.reject(application_id))


@router.post(
    "/{application_id}/undo-reject", response_model=ApplicationResponse, responses=_ERRORS
)
async def undo_reject(
    application_id: UUID,
    service: ApplicationWorkflowService = Depends(get_application_workflow_service),
) -> ApplicationResponse:
    return ApplicationResponse.from_domain(await service.undo_reject(application_id))


@router.post("/{application_id}/score", response_model=ApplicationResponse, responses=_ERRORS)
async def score(
    application_id: UUID,
    body: ScoreRequest,
    service: ApplicationWorkflowService = Depends(get_application_workflow_service),
) -> ApplicationResponse:
    return ApplicationResponse.from_domain(await service.score(application_id, body.score))


@router.post("/{application_id}/offer", response_model=ApplicationResponse, responses=_ERRORS)
async def make_offer(
    application_id: UUID,
    body: MakeOfferRequest | None = None,
    service: ApplicationWorkflowService = Depends(get_application_workflow_service),
) -> ApplicationResponse:
    body = body or MakeOfferRequest()
    application = await service.make_offer(
        application_id, expires_at=body.expires_at, supervisor_id=body.supervisor_id
    )
    return ApplicationResponse.from_domain(application)


@router.post(
    "/{application_id}/accept",
    response_model=ApplicationResponse,
    responses={
        **_ERRORS,
        410: {"model": ErrorResponse, "description": "Offer expired"},
    },
)
async def accept_offer(
    application_id: UUID,
    service: ApplicationWorkflowService = Depends(get_application_workflow_service),
) -> ApplicationResponse:
    """Accept an offer. Reserves supervisor capacity (409 CAPACITY_EXCEEDED)."""
    return ApplicationResponse.from_domain(await service.accept_offer(application_id))


@router.post(
    "/{application_id}/decline",
    response_model=ApplicationResponse,
    responses={
        **_ERRORS,
        410: {"model": ErrorResponse, "description": "Offer expired"},
    },
)
async def decline_offer(
    application_id: UUID,
    service: ApplicationWorkflowService = Depends(get_application_workflow_service),
) -> ApplicationResponse:
    return ApplicationResponse.from_domain(await service.decline_offer(application_id))


@router.post(
    "/{application_id}/withdraw", response_model=ApplicationResponse, responses=_ERRORS
)
async def withdraw(
    application_id: UUID,
    service: ApplicationWorkflowService = Depends(get_application_workflow_service),
) -> ApplicationResponse:
    return ApplicationResponse.from_domain(await service.withdraw(application_id))
