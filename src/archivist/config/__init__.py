"""Application configuration helpers."""

from __future__ import annotations

from .cloning import CloneSettings, get_clone_settings
from .env import env_flag, env_positive_int
from .errors import ConfigurationError
from .logging import configure_logging
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "CloneSettings",
    "ConfigurationError",
    "DatabaseConfig",
    "StorageConfig",
    "configure_logging",
    "env_flag",
    "env_positive_int",
    "get_clone_settings",
    "get_database_config",
    "get_storage_config",
]
