"""Collaboration workflow configuration.

This module defines the tunable limits of the collaboration lifecycle
engine with environment variable overrides for production tuning.

Environment Variables:
- COLLAB_DEFAULT_SUPERVISOR_CAPACITY: Active assignments per supervisor
  when no explicit limit is stored (default: 10)
- COLLAB_OFFER_VALIDITY_DAYS: Offer deadline when the caller gives none
  (default: 7)
- COLLAB_MIN_CHANGE_JUSTIFICATION: Minimum change-request justification
  length (default: 10)
- COLLAB_MIN_STATEMENT_LENGTH: Minimum application statement length after
  HTML stripping (default: 50)
- COLLAB_MIN_SUBMISSION_NOTES: Minimum submission notes length (default: 10)
- COLLAB_SUSPEND_ON_OPEN_DISPUTE: Block transitions on disputed subjects
  (default: true)
- COLLAB_PORTFOLIO_ROLE: Role recorded on new portfolio entries
  (default: "Project Contributor")
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from src.domain.models.portfolio import DEFAULT_PORTFOLIO_ROLE


def _get_int_env(key: str, default: int) -> int:
    """Get integer environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed integer value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_bool_env(key: str, default: bool) -> bool:
    """Get boolean environment variable with default.

    Accepts 1/true/yes/on and 0/false/no/off, case-insensitive.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in ("1", "true", "yes", "on"):
        return True
    if normalized in ("0", "false", "no", "off"):
        return False
    return default


@dataclass(frozen=True)
class WorkflowConfig:
    """Configuration for the collaboration workflows.

    Attributes:
        default_supervisor_capacity: Max concurrently active supervised
            assignments for supervisors without a stored limit.
        default_offer_validity_days: Offer deadline used when the caller
            does not pass one.
        min_change_justification_length: Minimum length of a change
            request justification.
        min_statement_length: Minimum application statement length.
        min_submission_notes_length: Minimum submission notes length.
        suspend_on_open_dispute: Whether an OPEN/UNDER_REVIEW dispute
            blocks transitions on its subject.
        portfolio_default_role: Role recorded on new portfolio entries.
    """

    default_supervisor_capacity: int = 10
    default_offer_validity_days: int = 7
    min_change_justification_length: int = 10
    min_statement_length: int = 50
    min_submission_notes_length: int = 10
    suspend_on_open_dispute: bool = True
    portfolio_default_role: str = DEFAULT_PORTFOLIO_ROLE

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.default_supervisor_capacity < 0:
            raise ValueError(
                "default_supervisor_capacity must be non-negative, "
                f"got {self.default_supervisor_capacity}"
            )
        if self.default_offer_validity_days < 1:
            raise ValueError(
                "default_offer_validity_days must be at least 1, "
                f"got {self.default_offer_validity_days}"
            )
        if self.min_change_justification_length < 1:
            raise ValueError(
                "min_change_justification_length must be positive, "
                f"got {self.min_change_justification_length}"
            )
        if self.min_statement_length < 0:
            raise ValueError(
                f"min_statement_length must be non-negative, got {self.min_statement_length}"
            )
        if self.min_submission_notes_length < 0:
            raise ValueError(
                "min_submission_notes_length must be non-negative, "
                f"got {self.min_submission_notes_length}"
            )
        if not self.portfolio_default_role.strip():
            raise ValueError("portfolio_default_role must not be blank")

    @classmethod
    def from_environment(cls) -> WorkflowConfig:
        """Create config from environment variables with defaults.

        Returns:
            WorkflowConfig with values from environment or defaults.
        """
        return cls(
            default_supervisor_capacity=_get_int_env(
                "COLLAB_DEFAULT_SUPERVISOR_CAPACITY", 10
            ),
            default_offer_validity_days=_get_int_env("COLLAB_OFFER_VALIDITY_DAYS", 7),
            min_change_justification_length=_get_int_env(
                "COLLAB_MIN_CHANGE_JUSTIFICATION", 10
            ),
            min_statement_length=_get_int_env("COLLAB_MIN_STATEMENT_LENGTH", 50),
            min_submission_notes_length=_get_int_env("COLLAB_MIN_SUBMISSION_NOTES", 10),
            suspend_on_open_dispute=_get_bool_env("COLLAB_SUSPEND_ON_OPEN_DISPUTE", True),
            portfolio_default_role=os.environ.get(
                "COLLAB_PORTFOLIO_ROLE", DEFAULT_PORTFOLIO_ROLE
            ),
        )


# Pre-defined configurations for common use cases

# Default production config
DEFAULT_WORKFLOW_CONFIG = WorkflowConfig()

# Testing config with small limits so capacity races are easy to provoke
TEST_WORKFLOW_CONFIG = WorkflowConfig(
    default_supervisor_capacity=2,
    default_offer_validity_days=1,
    min_statement_length=10,
)
