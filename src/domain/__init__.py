"""
Domain layer - Pure business logic for the collaboration lifecycle engine.

This layer contains:
- Domain models (Application, Milestone, Dispute, PortfolioEntry, etc.)
  with their transition matrices
- Domain events handed to the notification dispatcher
- Domain exceptions with stable machine-readable kinds

CRITICAL: This layer must NOT import from application, infrastructure, or api.
Only stdlib and typing imports are allowed.
"""

from src.domain.exceptions import CollaborationError

__all__: list[str] = ["CollaborationError"]
