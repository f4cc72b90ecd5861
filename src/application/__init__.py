"""
Application layer - Use cases and orchestration for the collaboration engine.

This layer contains:
- Workflow services (applications, milestones, disputes, capacity)
- Port definitions (abstract interfaces for infrastructure)

IMPORT RULES:
- CAN import from: domain
- CANNOT import from: infrastructure, api
"""
