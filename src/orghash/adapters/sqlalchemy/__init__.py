"""SQLAlchemy adapter package for orghash."""

from __future__ import annotations

from .content_store import (
    SqlAlchemyContentStore,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)
from .mappings import content_blob_table, metadata

__all__ = [
    "SqlAlchemyContentStore",
    "StartupError",
    "configured_engine",
    "content_blob_table",
    "is_started",
    "metadata",
    "shutdown",
    "startup",
]
