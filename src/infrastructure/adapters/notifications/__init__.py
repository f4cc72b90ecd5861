"""Notification delivery adapters."""

from src.infrastructure.adapters.notifications.log_dispatcher import (
    LogNotificationDispatcher,
)

__all__: list[str] = ["LogNotificationDispatcher"]
