"""
API layer - FastAPI routes and HTTP concerns for the collaboration engine.

This layer contains:
- FastAPI route definitions
- Request/Response DTOs
- HTTP middleware
- Domain error to HTTP status mapping

IMPORT RULES:
- CAN import from: application, domain, bootstrap
- Infrastructure is reached through the bootstrap container, except
  observability helpers used by middleware and startup
"""

__all__: list[str] = []
