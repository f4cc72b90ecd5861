"""Test helpers for the collaboration engine tests.

This package contains reusable test utilities and fake implementations
for dependency injection in unit tests.

Helpers:
    FakeTimeAuthority: Controllable time authority for deterministic tests
    collaboration_scenario: Drive records into a given lifecycle state

Usage:
    from tests.helpers import FakeTimeAuthority
    from tests.helpers.collaboration_scenario import milestone_at
"""

from tests.helpers.fake_time_authority import FakeTimeAuthority

__all__ = ["FakeTimeAuthority"]
