"""Domain errors for the collaboration lifecycle engine.

Provides specific exception classes for different failure scenarios.
All exceptions inherit from CollaborationError and carry a stable ``kind``.
"""

from src.domain.errors.capacity import CapacityExceededError
from src.domain.errors.concurrent_modification import ConcurrentModificationError
from src.domain.errors.dispute import (
    InvalidEscalationError,
    SubjectNotActiveError,
    SubjectUnderDisputeError,
)
from src.domain.errors.entity import AlreadyExistsError, EntityNotFoundError
from src.domain.errors.escrow import EscrowNotFundedError
from src.domain.errors.offer import OfferExpiredError
from src.domain.errors.state_transition import (
    InvalidStateError,
    InvalidTransitionError,
    IrreversibleStateError,
)
from src.domain.errors.validation import ValidationError

__all__: list[str] = [
    "AlreadyExistsError",
    "CapacityExceededError",
    "ConcurrentModificationError",
    "EntityNotFoundError",
    "EscrowNotFundedError",
    "InvalidEscalationError",
    "InvalidStateError",
    "InvalidTransitionError",
    "IrreversibleStateError",
    "OfferExpiredError",
    "SubjectNotActiveError",
    "SubjectUnderDisputeError",
    "ValidationError",
]
