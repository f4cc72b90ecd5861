"""Notification dispatcher port.

Email, in-app and WebSocket delivery live behind this interface. The
engine calls it after a transition is persisted and treats every
failure as non-fatal.
"""

from __future__ import annotations

from typing import Protocol

from src.domain.events.collaboration import CollaborationEvent


class NotificationDispatcherProtocol(Protocol):
    async def dispatch(self, event: CollaborationEvent) -> None:
        """Deliver an event to its recipients.

        Implementations may raise; callers log and carry on.
        """
        ...
