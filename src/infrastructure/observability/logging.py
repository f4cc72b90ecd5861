"""Structured logging configuration with structlog.

Workflow services log with module loggers (``get_logger(__name__)``) and
bind entity ids. This module decides how those events are rendered.

Log Entry Format (production):
    {
        "timestamp": "2026-01-01T00:00:00.000000Z",
        "level": "info",
        "event": "offer_accepted",
        "service": "collaboration-engine",
        "correlation_id": "uuid",
        "application_id": "uuid",
        ...additional context
    }

Environment Variables:
- LOG_LEVEL: Minimum level (default: INFO)
- COLLAB_LOG_FORMAT: ``json`` or ``console``; overrides the environment
  default

Usage:
    from src.infrastructure.observability import configure_structlog

    configure_structlog(environment="production")   # JSON output
    configure_structlog(environment="development")  # Console output
"""

import logging
import os
from typing import Any, cast

import structlog
from structlog.typing import Processor

from src.infrastructure.observability.correlation import correlation_id_processor

LOG_LEVEL_ENV = "LOG_LEVEL"
LOG_FORMAT_ENV = "COLLAB_LOG_FORMAT"
DEFAULT_LOG_LEVEL = "INFO"
SERVICE_NAME = "collaboration-engine"


def _get_log_level() -> int:
    """Return the logging level configured in LOG_LEVEL."""
    level_name = os.getenv(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).upper()
    return getattr(logging, level_name, logging.INFO)


def _add_service_name(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def _use_json(environment: str) -> bool:
    explicit = os.getenv(LOG_FORMAT_ENV, "").strip().lower()
    if explicit in ("json", "console"):
        return explicit == "json"
    return environment == "production"


def configure_structlog(environment: str = "production") -> None:
    """Configure structlog once at application startup.

    Args:
        environment: ``production`` renders JSON; anything else renders
            coloured console output unless COLLAB_LOG_FORMAT says otherwise.
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        cast(Processor, _add_service_name),
        cast(Processor, correlation_id_processor),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if _use_json(environment):
        final_processor: Processor = structlog.processors.JSONRenderer()
    else:
        final_processor = structlog.dev.ConsoleRenderer(colors=environment == "development")

    structlog.configure(
        processors=shared_processors + [final_processor],
        wrapper_class=structlog.make_filtering_bound_logger(_get_log_level()),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
