"""Offer expiry errors for the application workflow."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from src.domain.exceptions import CollaborationError


class OfferExpiredError(CollaborationError):
    """Raised when an offer is accepted after its deadline.

    The application has already been swept to DECLINED by the time the
    caller sees this error.

    Attributes:
        application_id: The application whose offer lapsed.
        expired_at: The stored offer deadline.
    """

    kind = "OFFER_EXPIRED"

    def __init__(self, application_id: UUID, expired_at: datetime) -> None:
        self.application_id = application_id
        self.expired_at = expired_at
        super().__init__(
            f"Offer for application {application_id} expired at {expired_at.isoformat()}",
            details={"application_id": application_id, "expired_at": expired_at.isoformat()},
        )
