"""Infrastructure adapters for the collaboration engine.

Adapters implement the ports defined in the application layer:
- persistence: PostgreSQL repositories (SQLAlchemy async + asyncpg)
- time: system clock
"""

__all__: list[str] = []
