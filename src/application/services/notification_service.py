"""Best-effort notification fan-out.

Wraps the notification dispatcher so workflow services can announce a
persisted transition without caring whether delivery works. Failures
are logged and swallowed; they never fail the transition.
"""

from __future__ import annotations

from structlog import get_logger

from src.application.ports.notification_dispatcher import (
    NotificationDispatcherProtocol,
)
from src.domain.events.collaboration import CollaborationEvent

logger = get_logger(__name__)


class NotificationService:
    """Fire-and-forget wrapper around a NotificationDispatcherProtocol.

    A service constructed without a dispatcher drops every event, which
    keeps unit tests free of notification plumbing.
    """

    def __init__(self, dispatcher: NotificationDispatcherProtocol | None = None) -> None:
        self._dispatcher = dispatcher

    async def notify(self, event: CollaborationEvent) -> bool:
        """Dispatch an event.

        Returns:
            True if the dispatcher accepted the event, False if it was
            dropped or delivery failed.
        """
        if self._dispatcher is None:
            return False

        try:
            await self._dispatcher.dispatch(event)
        except Exception as e:
            logger.warning(
                "notification_dispatch_failed",
                event_type=event.event_type,
                subject_id=str(event.subject_id),
                error=str(e),
            )
            return False

        logger.debug(
            "notification_dispatched",
            event_type=event.event_type,
            subject_id=str(event.subject_id),
        )
        return True
