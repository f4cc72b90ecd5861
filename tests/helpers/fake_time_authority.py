"""Controllable clock for deterministic workflow tests.

Offer deadlines, dispute timestamps and portfolio verification times are
all read from the injected time authority. Tests freeze the clock and
move it explicitly:

    >>> clock = FakeTimeAuthority()
    >>> offer = await service.make_offer(app_id, expires_at=clock.now() + timedelta(days=1))
    >>> clock.advance(delta=timedelta(days=1, seconds=1))
    >>> (await service.get_application(app_id)).status
    <ApplicationStatus.DECLINED: 'DECLINED'>

Most tests use the ``fake_time`` fixture from tests/conftest.py.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from src.application.ports.time_authority import TimeAuthorityProtocol

DEFAULT_FROZEN_AT = datetime(2026, 1, 1, 0, 0, 0, tzinfo=timezone.utc)


class FakeTimeAuthority(TimeAuthorityProtocol):
    """Time authority that only moves when told to."""

    def __init__(self, frozen_at: datetime | None = None) -> None:
        # Naive datetimes are taken as UTC
        self._current = _as_utc(frozen_at or DEFAULT_FROZEN_AT)

    def now(self) -> datetime:
        return self._current

    def utcnow(self) -> datetime:
        return self._current

    def advance(
        self,
        seconds: float | int | None = None,
        delta: timedelta | None = None,
    ) -> None:
        """Move the clock forward by ``delta`` or ``seconds``.

        Raises:
            ValueError: If neither is given or the step is negative.
        """
        if delta is None:
            if seconds is None:
                raise ValueError("Must provide either 'seconds' or 'delta' argument")
            delta = timedelta(seconds=seconds)
        if delta < timedelta(0):
            raise ValueError(f"Cannot advance time backwards by {delta}; use set_time()")
        self._current += delta

    def set_time(self, dt: datetime) -> None:
        self._current = _as_utc(dt)

    def __repr__(self) -> str:
        return f"FakeTimeAuthority(now={self._current.isoformat()})"


def _as_utc(dt: datetime) -> datetime:
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=timezone.utc)
