"""Domain port definitions for adapters."""

from __future__ import annotations

from .content_store import ContentStore
from .outline import OutlineDocument
from .viewer import DocumentOpener

__all__ = [
    "ContentStore",
    "DocumentOpener",
    "OutlineDocument",
]
