"""Storage backend configuration.

Environment Variables:
- COLLAB_STORAGE_BACKEND: ``memory`` (default) or ``postgres``
- DATABASE_URL: PostgreSQL connection string, required for ``postgres``
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum


class StorageBackend(str, Enum):
    """Where workflow records live."""

    MEMORY = "memory"
    """In-memory stubs, lost on restart."""

    POSTGRES = "postgres"
    """PostgreSQL through SQLAlchemy async + asyncpg."""


@dataclass(frozen=True)
class StorageConfig:
    """Configuration for the storage backend.

    Attributes:
        backend: Selected backend.
        database_url: Connection string for the postgres backend.
    """

    backend: StorageBackend = StorageBackend.MEMORY
    database_url: str | None = None

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.backend == StorageBackend.POSTGRES and not self.database_url:
            raise ValueError("database_url is required for the postgres backend")

    @classmethod
    def from_environment(cls) -> StorageConfig:
        """Create config from environment variables with defaults.

        Unknown backend names fall back to ``memory``.
        """
        raw = os.environ.get("COLLAB_STORAGE_BACKEND", StorageBackend.MEMORY.value)
        try:
            backend = StorageBackend(raw.strip().lower())
        except ValueError:
            backend = StorageBackend.MEMORY
        return cls(backend=backend, database_url=os.environ.get("DATABASE_URL"))


DEFAULT_STORAGE_CONFIG = StorageConfig()

TEST_STORAGE_CONFIG = StorageConfig(backend=StorageBackend.MEMORY)
