"""Suspension check for records with an unresolved dispute.

Application and milestone workflows call ``ensure_not_suspended`` before
every mutating transition. Lazy offer expiry is not a workflow action
and is never blocked.
"""

from __future__ import annotations

from uuid import UUID

from structlog import get_logger

from src.application.ports.dispute_repository import DisputeRepositoryProtocol
from src.domain.errors.dispute import SubjectUnderDisputeError
from src.domain.models.dispute import DisputeSubjectType

logger = get_logger(__name__)


class DisputeGuard:
    """Blocks transitions on subjects with an OPEN/UNDER_REVIEW dispute."""

    def __init__(self, dispute_repo: DisputeRepositoryProtocol, enabled: bool = True) -> None:
        self._dispute_repo = dispute_repo
        self._enabled = enabled

    async def ensure_not_suspended(
        self, subject_type: DisputeSubjectType, subject_id: UUID
    ) -> None:
        """Raise SubjectUnderDisputeError while a dispute is unresolved."""
        if not self._enabled:
            return

        dispute = await self._dispute_repo.find_open_for_subject(subject_type, subject_id)
        if dispute is not None:
            logger.info(
                "transition_blocked_by_dispute",
                subject_type=subject_type.value,
                subject_id=str(subject_id),
                dispute_id=str(dispute.id),
            )
            raise SubjectUnderDisputeError(subject_type, subject_id, dispute.id)
