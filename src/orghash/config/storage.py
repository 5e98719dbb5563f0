"""Data storage and content store configuration helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Final

from .env import optional_env_var, require_env_vars
from .errors import ConfigurationError

APP_DIR_NAME: Final[str] = "orghash"
DEFAULT_DB_FILENAME: Final[str] = "content.db"
VISIT_DIR_NAME: Final[str] = "visits"
DEFAULT_HTTP_TIMEOUT_SECONDS: Final[float] = 10.0


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    database_filename: str = DEFAULT_DB_FILENAME
    visit_dirname: str = VISIT_DIR_NAME

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def ensure_data_dir(self) -> Path:
        data_dir = self.resolve_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def database_path(self, *, ensure: bool = True) -> Path:
        base = self.ensure_data_dir() if ensure else self.resolve_data_dir()
        return base / self.database_filename

    def visit_dir(self, *, ensure: bool = True) -> Path:
        path = self.resolve_data_dir() / self.visit_dirname
        if ensure:
            path.mkdir(parents=True, exist_ok=True)
        return path

    def database_uri(self) -> str:
        return f"sqlite+pysqlite:///{self.database_path()}"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


class StoreBackend(StrEnum):
    SQLITE = "sqlite"
    HTTP = "http"


@dataclass(frozen=True, slots=True)
class ContentStoreConfig:
    backend: StoreBackend = StoreBackend.SQLITE
    base_url: str | None = None
    timeout_seconds: float = DEFAULT_HTTP_TIMEOUT_SECONDS


def _default_data_dir() -> Path:
    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA")
        base_path = Path(base) if base else (Path.home() / "AppData" / "Local")
    else:
        base = os.getenv("XDG_DATA_HOME")
        base_path = Path(base) if base else (Path.home() / ".local" / "share")
    return (base_path / APP_DIR_NAME).expanduser().resolve()


def get_storage_config() -> StorageConfig:
    env_dir = optional_env_var("ORGHASH_DATA_DIR")
    data_dir = Path(env_dir) if env_dir else _default_data_dir()
    return StorageConfig(data_dir=data_dir)


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    env_uri = optional_env_var("DATABASE_URI")
    if env_uri:
        return DatabaseConfig(uri=env_uri)
    storage_config = storage or get_storage_config()
    return DatabaseConfig(uri=storage_config.database_uri())


def get_content_store_config() -> ContentStoreConfig:
    raw_backend = optional_env_var("ORGHASH_STORE") or StoreBackend.SQLITE.value
    try:
        backend = StoreBackend(raw_backend.lower())
    except ValueError as exc:
        raise ConfigurationError(f"Invalid ORGHASH_STORE: {raw_backend}") from exc

    if backend is StoreBackend.SQLITE:
        return ContentStoreConfig(backend=backend)

    base_url = require_env_vars(("ORGHASH_STORE_URL",))["ORGHASH_STORE_URL"]
    timeout = DEFAULT_HTTP_TIMEOUT_SECONDS
    raw_timeout = optional_env_var("ORGHASH_STORE_TIMEOUT")
    if raw_timeout is not None:
        try:
            timeout = float(raw_timeout)
        except ValueError as exc:
            raise ConfigurationError(f"Invalid ORGHASH_STORE_TIMEOUT: {raw_timeout}") from exc
        if timeout <= 0:
            raise ConfigurationError("ORGHASH_STORE_TIMEOUT must be positive")
    return ContentStoreConfig(backend=backend, base_url=base_url, timeout_seconds=timeout)
