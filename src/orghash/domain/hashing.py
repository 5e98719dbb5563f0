"""Deterministic digests of outline entry bodies.

The digest of an entry is computed over its body text with every
``:HASH_<algorithm>:`` property line removed, whatever its algorithm, so that
recording a hash (on the entry itself or on any of its descendants) never
changes the digest of the content it describes.
"""

from __future__ import annotations

import hashlib
import re
from typing import TYPE_CHECKING, Final

from orghash.domain.model import Algorithm, PropertyKind

if TYPE_CHECKING:
    from collections.abc import Callable

TRUNCATED_HEX_LENGTH: Final[int] = 64

_HASHLIB_NAMES: Final[dict[Algorithm, str]] = {
    Algorithm.MD5: "md5",
    Algorithm.SHA1: "sha1",
    Algorithm.SHA224: "sha224",
    Algorithm.SHA256: "sha256",
    Algorithm.SHA384: "sha384",
    Algorithm.SHA512: "sha512",
    Algorithm.SHA512_TRUNCATED_256: "sha512",
}

DIGEST_LENGTHS: Final[dict[Algorithm, int]] = {
    Algorithm.MD5: 32,
    Algorithm.SHA1: 40,
    Algorithm.SHA224: 56,
    Algorithm.SHA256: 64,
    Algorithm.SHA384: 96,
    Algorithm.SHA512: 128,
    Algorithm.SHA512_TRUNCATED_256: TRUNCATED_HEX_LENGTH,
}

_EMPTY_DRAWER_RE: Final[re.Pattern[str]] = re.compile(
    r"^[ \t]*:PROPERTIES:[ \t]*\r?\n[ \t]*:END:[ \t]*(?:\r?\n|\Z)",
    re.MULTILINE | re.IGNORECASE,
)

_HASH_LINE_RE: Final[re.Pattern[str]] = re.compile(
    r"^[ \t]*:"
    + re.escape(PropertyKind.HASH.value)
    + "_(?:"
    + "|".join(re.escape(a.value) for a in sorted(Algorithm, key=len, reverse=True))
    + r"):(?:[ \t].*)?(?:\r?\n|\Z)",
    re.MULTILINE | re.IGNORECASE,
)


def property_key(kind: PropertyKind | str, algorithm: Algorithm | str) -> str:
    """Return the property name recording ``kind`` for ``algorithm``, e.g. ``HASH_sha256``."""

    return f"{PropertyKind(kind).value}_{Algorithm.parse(algorithm).value}"


def strip_hash_property(body: str) -> str:
    """Remove every ``HASH_<algorithm>`` property line from ``body``.

    Lines for all supported algorithms go, so recording a digest under one
    algorithm never changes the digest recorded under another. A property
    drawer left empty by the removal is dropped too, since adapters create the
    drawer on demand when the first property is written.
    """

    return _EMPTY_DRAWER_RE.sub("", _HASH_LINE_RE.sub("", body))


def _hasher(algorithm: Algorithm) -> Callable[[bytes], str]:
    name = _HASHLIB_NAMES[algorithm]
    if algorithm is Algorithm.SHA512_TRUNCATED_256:
        return lambda data: hashlib.new(name, data).hexdigest()[:TRUNCATED_HEX_LENGTH]
    return lambda data: hashlib.new(name, data).hexdigest()


def digest_bytes(content: bytes, algorithm: Algorithm | str) -> str:
    """Hex digest of raw bytes, without any normalisation."""

    return _hasher(Algorithm.parse(algorithm))(content)


def compute_digest(body: str, algorithm: Algorithm | str) -> str:
    """Hex digest of an entry body after stripping its recorded hash properties."""

    resolved = Algorithm.parse(algorithm)
    normalized = strip_hash_property(body)
    return digest_bytes(normalized.encode("utf-8"), resolved)
