"""Notification dispatcher that writes events to the structured log.

Email and WebSocket delivery are out of scope for the engine; this
adapter gives operators an audit trail of what would have been sent.
"""

from __future__ import annotations

from structlog import get_logger

from src.application.ports.notification_dispatcher import (
    NotificationDispatcherProtocol,
)
from src.domain.events.collaboration import CollaborationEvent

logger = get_logger(__name__)


class LogNotificationDispatcher(NotificationDispatcherProtocol):
    async def dispatch(self, event: CollaborationEvent) -> None:
        logger.info("collaboration_notification", **event.to_dict())
