"""Errors raised by the hashing and archival domain."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from orghash.domain.verification import ReconcileResult


class OrgHashError(RuntimeError):
    """Base class for domain errors."""


class UnsupportedAlgorithmError(OrgHashError, ValueError):
    """Raised when an algorithm identifier is not recognised."""

    def __init__(self, algorithm: object) -> None:
        super().__init__(f"Unsupported hash algorithm: {algorithm!r}")
        self.algorithm = algorithm


class HashMismatchError(OrgHashError):
    """Raised when an entry no longer matches its recorded digest."""

    def __init__(
        self,
        ref: object,
        *,
        description: str,
        algorithm: str,
        expected: str,
        actual: str,
    ) -> None:
        super().__init__(
            f"{algorithm} hash mismatch at {description}: recorded {expected}, computed {actual}"
        )
        self.ref = ref
        self.description = description
        self.algorithm = algorithm
        self.expected = expected
        self.actual = actual


class HashMismatchesError(OrgHashError):
    """Raised after a collecting reconciliation pass found diverged entries."""

    def __init__(
        self,
        mismatches: Sequence[HashMismatchError],
        *,
        result: ReconcileResult,
    ) -> None:
        locations = "; ".join(mismatch.description for mismatch in mismatches)
        super().__init__(f"{len(mismatches)} hash mismatch(es): {locations}")
        self.mismatches = tuple(mismatches)
        self.result = result


class ArchivedContentMissingError(OrgHashError):
    """Raised when the content store has nothing for a recorded handle."""

    def __init__(self, handle: str, *, algorithm: str) -> None:
        super().__init__(f"No archived {algorithm} content for handle {handle}")
        self.handle = handle
        self.algorithm = algorithm


class ContentStoreError(OrgHashError):
    """Raised by content store adapters when a save or fetch fails."""
