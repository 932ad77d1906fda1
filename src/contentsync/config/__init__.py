"""Application configuration helpers."""

from __future__ import annotations

from .env import env_flag, env_list, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .importer import DEFAULT_FORMAT, ImporterConfig, get_importer_config
from .logging import configure_logging
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "DEFAULT_FORMAT",
    "ConfigurationError",
    "DatabaseConfig",
    "ImporterConfig",
    "MissingConfigurationError",
    "StorageConfig",
    "configure_logging",
    "env_flag",
    "env_list",
    "get_database_config",
    "get_importer_config",
    "get_storage_config",
    "require_env_vars",
]
