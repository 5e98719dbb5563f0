"""Port describing the host outline document."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence


@runtime_checkable
class OutlineDocument[TRef](Protocol):
    """Entry-scoped access to properties, body text and tags of an outline.

    Entry references are opaque to the domain; adapters decide what identifies an
    entry. All calls are synchronous and assume a single writer per document.
    """

    def get_property(self, ref: TRef, key: str) -> str | None: ...

    def put_property(self, ref: TRef, key: str, value: str) -> None: ...

    def delete_property(self, ref: TRef, key: str) -> None: ...

    def get_body(self, ref: TRef) -> str:
        """Text from the entry heading up to the next heading at the same or higher level."""
        ...

    def delete_body(self, ref: TRef) -> None:
        """Remove everything below the heading line, including properties and children."""
        ...

    def get_tags(self, ref: TRef) -> list[str]: ...

    def set_tags(self, ref: TRef, tags: Sequence[str]) -> None: ...

    def iter_entries(self) -> Iterator[TRef]:
        """Yield every entry in depth-first pre-order; each call starts a fresh pass."""
        ...

    def describe(self, ref: TRef) -> str:
        """Human-readable position of an entry, used in error messages."""
        ...
