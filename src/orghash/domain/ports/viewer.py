"""Port for presenting archived content to the user."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from orghash.domain.model import Algorithm


@runtime_checkable
class DocumentOpener(Protocol):
    """Opens fetched content as a new editable document and returns where it lives."""

    def __call__(self, content: bytes, *, handle: str, algorithm: Algorithm) -> str: ...
