"""
Infrastructure layer - External adapters for the collaboration engine.

This layer contains:
- In-memory stubs for development and testing
- PostgreSQL persistence adapters (SQLAlchemy async)
- System clock adapter
- Observability (structlog configuration, correlation IDs)

IMPORT RULES:
- CAN import from: domain, application
- Implements ports defined in application layer
"""
