"""Timestamp normalisation shared by the workflow records.

Every stored timestamp is timezone-aware UTC so deadline comparisons
against the time authority never mix naive and aware values.
"""

from __future__ import annotations

from datetime import datetime, timezone


def as_utc(value: datetime) -> datetime:
    """Return ``value`` in UTC, reading a naive datetime as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
