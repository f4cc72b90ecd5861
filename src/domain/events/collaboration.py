"""Collaboration lifecycle event payloads.

Events are handed to the notification dispatcher after a transition has
been persisted. Delivery is best-effort; a failed dispatch never undoes
the transition that produced the event.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID

# Application workflow
APPLICATION_SUBMITTED_EVENT_TYPE: str = "collaboration.application.submitted"
APPLICATION_SHORTLISTED_EVENT_TYPE: str = "collaboration.application.shortlisted"
APPLICATION_WAITLISTED_EVENT_TYPE: str = "collaboration.application.waitlisted"
APPLICATION_REJECTED_EVENT_TYPE: str = "collaboration.application.rejected"
APPLICATION_OFFERED_EVENT_TYPE: str = "collaboration.application.offered"
APPLICATION_ASSIGNED_EVENT_TYPE: str = "collaboration.application.assigned"
APPLICATION_DECLINED_EVENT_TYPE: str = "collaboration.application.declined"
APPLICATION_OFFER_EXPIRED_EVENT_TYPE: str = "collaboration.application.offer_expired"

# Milestone and escrow workflow
MILESTONE_STATUS_CHANGED_EVENT_TYPE: str = "collaboration.milestone.status_changed"
MILESTONE_ESCROW_CHANGED_EVENT_TYPE: str = "collaboration.milestone.escrow_changed"
MILESTONE_SUBMITTED_EVENT_TYPE: str = "collaboration.milestone.submitted"
MILESTONE_CHANGES_REQUESTED_EVENT_TYPE: str = "collaboration.milestone.changes_requested"
MILESTONE_RELEASED_EVENT_TYPE: str = "collaboration.milestone.released"

# Dispute ladder
DISPUTE_OPENED_EVENT_TYPE: str = "collaboration.dispute.opened"
DISPUTE_ESCALATED_EVENT_TYPE: str = "collaboration.dispute.escalated"
DISPUTE_CLOSED_EVENT_TYPE: str = "collaboration.dispute.closed"

# Supervisor requests
SUPERVISOR_REQUEST_CREATED_EVENT_TYPE: str = "collaboration.supervisor_request.created"
SUPERVISOR_REQUEST_DECIDED_EVENT_TYPE: str = "collaboration.supervisor_request.decided"


@dataclass(frozen=True, eq=True)
class CollaborationEvent:
    """A notification-worthy change to a collaboration record.

    Attributes:
        event_type: One of the ``*_EVENT_TYPE`` constants.
        subject_id: Record the event is about.
        occurred_at: When the transition was persisted (UTC).
        recipient_ids: Parties to notify.
        payload: Small JSON-safe context (states, ids as strings).
    """

    event_type: str
    subject_id: UUID
    occurred_at: datetime
    recipient_ids: tuple[UUID, ...] = field(default=())
    payload: dict[str, Any] = field(default_factory=dict, compare=False)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-safe dict for dispatch."""
        return {
            "event_type": self.event_type,
            "subject_id": str(self.subject_id),
            "occurred_at": self.occurred_at.isoformat(),
            "recipient_ids": [str(r) for r in self.recipient_ids],
            "payload": dict(self.payload),
        }
