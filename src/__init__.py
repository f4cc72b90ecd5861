"""
Collaboration lifecycle engine.

Drives the student/partner collaboration lifecycle: applications and
offers, supervisor capacity, milestone escrow, dispute escalation and
portfolio entries for delivered work.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
