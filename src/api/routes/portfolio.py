"""Student portfolio routes."""

from uuid import UUID

from fastapi import APIRouter, Depends

from src.api.dependencies.collaboration import get_portfolio_service
from src.api.models.portfolio import PortfolioEntryResponse
from src.application.services.portfolio_auto_creation_service import (
    PortfolioAutoCreationService,
)

router = APIRouter(prefix="/v1/students/{student_id}/portfolio", tags=["portfolio"])


@router.get("", response_model=list[PortfolioEntryResponse])
async def list_student_portfolio(
    student_id: UUID,
    service: PortfolioAutoCreationService = Depends(get_portfolio_service),
) -> list[PortfolioEntryResponse]:
    entries = await service.list_student_portfolio(student_id)
    return [PortfolioEntryResponse.from_domain(e) for e in entries]
