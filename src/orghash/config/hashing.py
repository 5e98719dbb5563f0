"""Hashing and reconciliation defaults."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from orghash.domain.model import (
    Algorithm,
    MismatchPolicy,
    UnsupportedAlgorithmError,
)

from .env import optional_env_var
from .errors import ConfigurationError

DEFAULT_ALGORITHM: Final[Algorithm] = Algorithm.SHA256
DEFAULT_ARCHIVE_TAG: Final[str] = "ARCHIVE"


@dataclass(frozen=True, slots=True)
class HashSettings:
    """Settings threaded through every hashing and archival operation."""

    default_algorithm: Algorithm = DEFAULT_ALGORITHM
    mismatch_policy: MismatchPolicy = MismatchPolicy.FAIL_FAST
    archive_tag: str = DEFAULT_ARCHIVE_TAG

    def resolve(self, algorithm: Algorithm | str | None = None) -> Algorithm:
        """Return the per-call override if given, otherwise the configured default."""

        if algorithm is None:
            return self.default_algorithm
        return Algorithm.parse(algorithm)


def get_hash_settings() -> HashSettings:
    algorithm = DEFAULT_ALGORITHM
    raw_algorithm = optional_env_var("ORGHASH_ALGORITHM")
    if raw_algorithm is not None:
        try:
            algorithm = Algorithm.parse(raw_algorithm)
        except UnsupportedAlgorithmError as exc:
            raise ConfigurationError(f"Invalid ORGHASH_ALGORITHM: {raw_algorithm}") from exc

    policy = MismatchPolicy.FAIL_FAST
    raw_policy = optional_env_var("ORGHASH_MISMATCH_POLICY")
    if raw_policy is not None:
        try:
            policy = MismatchPolicy(raw_policy.lower())
        except ValueError as exc:
            raise ConfigurationError(f"Invalid ORGHASH_MISMATCH_POLICY: {raw_policy}") from exc

    archive_tag = optional_env_var("ORGHASH_ARCHIVE_TAG") or DEFAULT_ARCHIVE_TAG
    if ":" in archive_tag or " " in archive_tag:
        raise ConfigurationError(f"Invalid ORGHASH_ARCHIVE_TAG: {archive_tag}")

    return HashSettings(
        default_algorithm=algorithm,
        mismatch_policy=policy,
        archive_tag=archive_tag,
    )
