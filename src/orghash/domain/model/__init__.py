"""Domain model for entry hashing and archival."""

from __future__ import annotations

from .enums import Algorithm, HashAction, HashStatus, MismatchPolicy, PropertyKind
from .errors import (
    ArchivedContentMissingError,
    ContentStoreError,
    HashMismatchError,
    HashMismatchesError,
    OrgHashError,
    UnsupportedAlgorithmError,
)

__all__ = [
    "Algorithm",
    "ArchivedContentMissingError",
    "ContentStoreError",
    "HashAction",
    "HashMismatchError",
    "HashMismatchesError",
    "HashStatus",
    "MismatchPolicy",
    "OrgHashError",
    "PropertyKind",
    "UnsupportedAlgorithmError",
]
