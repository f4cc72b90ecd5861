"""Configuration module for the collaboration lifecycle engine.

This module provides centralized configuration for the workflows and
the storage backend.

Available Configurations:
- WorkflowConfig: Capacity defaults, offer validity, validation limits
- StorageConfig: Memory or PostgreSQL backend selection
"""

from src.config.storage_config import (
    DEFAULT_STORAGE_CONFIG,
    TEST_STORAGE_CONFIG,
    StorageBackend,
    StorageConfig,
)
from src.config.workflow_config import (
    DEFAULT_WORKFLOW_CONFIG,
    TEST_WORKFLOW_CONFIG,
    WorkflowConfig,
)

__all__ = [
    "DEFAULT_STORAGE_CONFIG",
    "DEFAULT_WORKFLOW_CONFIG",
    "StorageBackend",
    "StorageConfig",
    "TEST_STORAGE_CONFIG",
    "TEST_WORKFLOW_CONFIG",
    "WorkflowConfig",
]
