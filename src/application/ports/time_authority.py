"""Time authority port - the single source of "now" for every workflow.

Offer expiry, dispute resolution timestamps and portfolio verification
times are all compared against this clock. Services inject a
TimeAuthorityProtocol instead of calling ``datetime.now()`` so that
expiry logic is deterministic under test.

For production:
    Use SystemTimeAuthority from src/infrastructure/adapters/time/

For testing:
    Use FakeTimeAuthority from tests/helpers/fake_time_authority.py
"""

from abc import ABC, abstractmethod
from datetime import datetime


class TimeAuthorityProtocol(ABC):
    """Abstract interface for time authority."""

    @abstractmethod
    def now(self) -> datetime:
        """Return current time with timezone awareness (UTC)."""
        ...

    @abstractmethod
    def utcnow(self) -> datetime:
        """Return current time as a timezone-aware UTC datetime.

        Offer deadlines are compared against this value.
        """
        ...
