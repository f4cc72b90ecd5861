"""Escrow guard errors for the milestone workflow."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from src.domain.exceptions import CollaborationError

if TYPE_CHECKING:
    from src.domain.models.milestone import EscrowStatus


class EscrowNotFundedError(CollaborationError):
    """Raised when work would start on a milestone whose escrow is not FUNDED.

    Attributes:
        milestone_id: The milestone being started.
        escrow_status: Escrow status found on the milestone.
    """

    kind = "ESCROW_NOT_FUNDED"

    def __init__(self, milestone_id: UUID, escrow_status: EscrowStatus) -> None:
        self.milestone_id = milestone_id
        self.escrow_status = escrow_status
        super().__init__(
            f"Escrow must be funded before starting milestone {milestone_id}. "
            f"Current escrow status: {escrow_status.value}",
            details={"milestone_id": milestone_id, "escrow_status": escrow_status},
        )
