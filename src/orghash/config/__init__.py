"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .hashing import DEFAULT_ALGORITHM, DEFAULT_ARCHIVE_TAG, HashSettings, get_hash_settings
from .logging import configure_logging
from .storage import (
    ContentStoreConfig,
    DatabaseConfig,
    StorageConfig,
    StoreBackend,
    get_content_store_config,
    get_database_config,
    get_storage_config,
)

__all__ = [
    "DEFAULT_ALGORITHM",
    "DEFAULT_ARCHIVE_TAG",
    "ConfigurationError",
    "ContentStoreConfig",
    "DatabaseConfig",
    "HashSettings",
    "MissingConfigurationError",
    "StorageConfig",
    "StoreBackend",
    "configure_logging",
    "get_content_store_config",
    "get_database_config",
    "get_hash_settings",
    "get_storage_config",
    "optional_env_var",
    "require_env_vars",
]
