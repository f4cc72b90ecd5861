"""Notification dispatcher stub that records events instead of sending them."""

from __future__ import annotations

from src.application.ports.notification_dispatcher import (
    NotificationDispatcherProtocol,
)
from src.domain.events.collaboration import CollaborationEvent


class NotificationDispatcherStub(NotificationDispatcherProtocol):
    """Collects dispatched events in memory.

    Attributes:
        dispatched: Events in dispatch order.
        fail_with: When set, dispatch raises this exception instead.
    """

    def __init__(self) -> None:
        self.dispatched: list[CollaborationEvent] = []
        self.fail_with: Exception | None = None

    async def dispatch(self, event: CollaborationEvent) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.dispatched.append(event)

    def event_types(self) -> list[str]:
        return [e.event_type for e in self.dispatched]

    def clear(self) -> None:
        self.dispatched.clear()
        self.fail_with = None
