"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum

from .errors import UnsupportedAlgorithmError


class Algorithm(StrEnum):
    """Digest families understood by the hash engine."""

    MD5 = "md5"
    SHA1 = "sha1"
    SHA224 = "sha224"
    SHA256 = "sha256"
    SHA384 = "sha384"
    SHA512 = "sha512"
    SHA512_TRUNCATED_256 = "sha512-truncated-256"

    @classmethod
    def parse(cls, value: Algorithm | str) -> Algorithm:
        if isinstance(value, Algorithm):
            return value
        try:
            return cls(value.strip().lower())
        except (AttributeError, ValueError):
            raise UnsupportedAlgorithmError(value) from None


class PropertyKind(StrEnum):
    HASH = "HASH"
    STORED = "STORED"


class HashStatus(StrEnum):
    """Outcome of comparing a recorded digest with a fresh one."""

    ABSENT = "absent"
    MATCH = "match"
    MISMATCH = "mismatch"


class HashAction(StrEnum):
    UPDATED = "updated"
    CONFIRMED = "confirmed"


class MismatchPolicy(StrEnum):
    """How whole-document reconciliation reacts to a diverged entry."""

    FAIL_FAST = "fail-fast"
    COLLECT = "collect"
