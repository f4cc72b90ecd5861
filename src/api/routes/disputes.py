"""Dispute escalation routes."""

from uuid import UUID

from fastapi import APIRouter, Depends

from src.api.dependencies.collaboration import get_dispute_escalation_service
from src.api.models.common import ErrorResponse
from src.api.models.dispute import (
    CreateDisputeRequest,
    DisputeResponse,
    ResolveDisputeRequest,
)
from src.application.services.dispute_escalation_service import (
    DisputeEscalationService,
)
from src.domain.models.dispute import DisputeSubjectType

router = APIRouter(prefix="/v1/disputes", tags=["disputes"])

_ERRORS = {
    400: {"model": ErrorResponse, "description": "Escalation not legal"},
    404: {"model": ErrorResponse, "description": "Dispute or subject not found"},
    409: {"model": ErrorResponse, "description": "Subject already disputed"},
}


@router.post("", response_model=DisputeResponse, status_code=201, responses=_ERRORS)
async def create_dispute(
    body: CreateDisputeRequest,
    service: DisputeEscalationService = Depends(get_dispute_escalation_service),
) -> DisputeResponse:
    dispute = await service.create_dispute(
        subject_type=body.subject_type,
        subject_id=body.subject_id,
        reason=body.reason,
        description=body.description,
        raised_by=body.raised_by,
        evidence=body.evidence,
    )
    return DisputeResponse.from_domain(dispute)


@router.get("", response_model=list[DisputeResponse])
async def list_for_subject(
    subject_type: DisputeSubjectType,
    subject_id: UUID,
    service: DisputeEscalationService = Depends(get_dispute_escalation_service),
) -> list[DisputeResponse]:
    disputes = await service.list_for_subject(subject_type, subject_id)
    return [DisputeResponse.from_domain(d) for d in disputes]


@router.get("/{dispute_id}", response_model=DisputeResponse, responses=_ERRORS)
async def get_dispute(
    dispute_id: UUID,
    service: DisputeEscalationService = Depends(get_dispute_escalation_service),
) -> DisputeResponse:
    return DisputeResponse.from_domain(await service.get_dispute(dispute_id))


@router.post("/{dispute_id}/review", response_model=DisputeResponse, responses=_ERRORS)
async def start_review(
    dispute_id: UUID,
    service: DisputeEscalationService = Depends(get_dispute_escalation_service),
) -> DisputeResponse:
    return DisputeResponse.from_domain(await service.start_review(dispute_id))


@router.post("/{dispute_id}/escalate", response_model=DisputeResponse, responses=_ERRORS)
async def escalate(
    dispute_id: UUID,
    service: DisputeEscalationService = Depends(get_dispute_escalation_service),
) -> DisputeResponse:
    return DisputeResponse.from_domain(await service.escalate(dispute_id))


@router.post("/{dispute_id}/resolve", response_model=DisputeResponse, responses=_ERRORS)
async def resolve(
    dispute_id: UUID,
    body: ResolveDisputeRequest,
    service: DisputeEscalationService = Depends(get_dispute_escalation_service),
) -> DisputeResponse:
    return DisputeResponse.from_domain(await service.resolve(dispute_id, body.resolution))


@router.post("/{dispute_id}/reject", response_model=DisputeResponse, responses=_ERRORS)
async def reject(
    dispute_id: UUID,
    service: DisputeEscalationService = Depends(get_dispute_escalation_service),
) -> DisputeResponse:
    return DisputeResponse.from_domain(await service.reject(dispute_id))
