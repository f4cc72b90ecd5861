"""Correlation IDs for request-scoped log context.

Every HTTP request (or CLI/cron invocation) runs under one correlation
ID held in a contextvar, so every workflow log line emitted while
handling it can be joined back together, including lines emitted from
background portfolio tasks created during the request.

Usage:
    # In middleware (request start)
    token = set_correlation_id(request.headers.get(CORRELATION_ID_HEADER) or generate_correlation_id())
    ...
    reset_correlation_id(token)

    # In structlog configuration
    processors = [..., correlation_id_processor, ...]
"""

from contextvars import ContextVar, Token
from typing import Any
from uuid import uuid4

CORRELATION_ID_HEADER = "X-Correlation-ID"

# Empty string means "no request context"
_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def generate_correlation_id() -> str:
    """Return a new UUID4 string."""
    return str(uuid4())


def get_correlation_id() -> str:
    """Return the current correlation ID, or an empty string outside a request."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str) -> Token[str]:
    """Set the correlation ID for the current context.

    Returns:
        Token to pass to ``reset_correlation_id`` when the request ends.
    """
    return _correlation_id.set(correlation_id)


def reset_correlation_id(token: Token[str]) -> None:
    """Restore the correlation ID that was active before ``set_correlation_id``."""
    _correlation_id.reset(token)


def correlation_id_processor(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor adding ``correlation_id`` when one is set.

    Args:
        logger: Unused, required by structlog.
        method_name: Unused, required by structlog.
        event_dict: The event dictionary to modify.
    """
    correlation_id = get_correlation_id()
    if correlation_id:
        event_dict.setdefault("correlation_id", correlation_id)
    return event_dict
