"""Port for the external content-addressed store."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from orghash.domain.model import Algorithm


@runtime_checkable
class ContentStore(Protocol):
    """Stores bytes under a handle derived from their content."""

    def save(self, content: bytes, algorithm: Algorithm) -> str: ...

    def get(self, handle: str, algorithm: Algorithm) -> bytes | None: ...
