"""
Domain events for the collaboration lifecycle engine.

Events describe persisted state changes and are handed to the
notification dispatcher. All events are immutable and timestamped.
"""

from src.domain.events.collaboration import CollaborationEvent

__all__: list[str] = ["CollaborationEvent"]
