"""Plain-text org outline adapter."""

from __future__ import annotations

from .document import (
    EntryNotFoundError,
    OrgDocument,
    load_org_file,
    parse_org,
    save_org_file,
)
from .parser import OrgEntry

__all__ = [
    "EntryNotFoundError",
    "OrgDocument",
    "OrgEntry",
    "load_org_file",
    "parse_org",
    "save_org_file",
]
