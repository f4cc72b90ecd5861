"""Composition root for the collaboration engine.

``container`` wires every service against either the in-memory stubs or
the PostgreSQL adapters; ``database`` owns the shared async engine. API
routes reach services only through the container.
"""
