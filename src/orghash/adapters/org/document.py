"""In-memory org document implementing the outline port."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from .parser import OrgEntry, join_lines, parse_entries, parse_property_line

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence
    from pathlib import Path

log = getLogger(__name__)


class EntryNotFoundError(LookupError):
    """Raised when an entry selector matches nothing in the document."""


class OrgDocument:
    """Mutable org outline addressed by :class:`OrgEntry` references."""

    def __init__(self, preamble: list[str], roots: list[OrgEntry]) -> None:
        self.preamble = preamble
        self.roots = roots

    # Outline port ------------------------------------------------------------

    def get_property(self, ref: OrgEntry, key: str) -> str | None:
        if ref.drawer is None:
            return None
        for line in ref.drawer:
            parsed = parse_property_line(line)
            if parsed is not None and parsed[0].casefold() == key.casefold():
                return parsed[1]
        return None

    def put_property(self, ref: OrgEntry, key: str, value: str) -> None:
        if ref.drawer is None:
            ref.drawer = []
            ref.drawer_open = ":PROPERTIES:\n"
            ref.drawer_close = ":END:\n"
        for index, line in enumerate(ref.drawer):
            parsed = parse_property_line(line)
            if parsed is not None and parsed[0].casefold() == key.casefold():
                indent = line[: len(line) - len(line.lstrip(" \t"))]
                ref.drawer[index] = f"{indent}:{key}: {value}\n"
                return
        ref.drawer.append(f":{key}: {value}\n")

    def delete_property(self, ref: OrgEntry, key: str) -> None:
        if ref.drawer is None:
            return
        ref.drawer = [
            line
            for line in ref.drawer
            if (parsed := parse_property_line(line)) is None
            or parsed[0].casefold() != key.casefold()
        ]
        if not ref.drawer:
            ref.drawer = None

    def get_body(self, ref: OrgEntry) -> str:
        text = join_lines([line for entry in ref.walk() for line in entry.own_lines()])
        # The last entry of a file may lack a final newline until a drawer is added.
        return text if text.endswith("\n") else f"{text}\n"

    def delete_body(self, ref: OrgEntry) -> None:
        ref.planning = []
        ref.drawer = None
        ref.lines = []
        ref.children = []

    def get_tags(self, ref: OrgEntry) -> list[str]:
        return list(ref.tags)

    def set_tags(self, ref: OrgEntry, tags: Sequence[str]) -> None:
        ref.tags = list(dict.fromkeys(tags))
        ref.render_heading()

    def iter_entries(self) -> Iterator[OrgEntry]:
        snapshot = [entry for root in self.roots for entry in root.walk()]
        yield from snapshot

    def describe(self, ref: OrgEntry) -> str:
        return f"line {self.line_of(ref)}: {'*' * ref.level} {ref.title}".rstrip()

    # Lookups -------------------------------------------------------------------

    def line_of(self, ref: OrgEntry) -> int:
        """Return the 1-based line number of the heading of ``ref``."""

        line = len(self.preamble) + 1
        for entry in self.iter_entries():
            if entry is ref:
                return line
            line += len(entry.own_lines())
        raise EntryNotFoundError(f"Entry {ref.title!r} is not part of this document")

    def entry_at_line(self, line: int) -> OrgEntry:
        """Return the innermost entry whose own lines contain ``line`` (1-based)."""

        start = len(self.preamble) + 1
        for entry in self.iter_entries():
            end = start + len(entry.own_lines())
            if start <= line < end:
                return entry
            start = end
        raise EntryNotFoundError(f"No entry at line {line}")

    def find_by_id(self, entry_id: str) -> OrgEntry:
        for entry in self.iter_entries():
            if self.get_property(entry, "ID") == entry_id:
                return entry
        raise EntryNotFoundError(f"No entry with ID {entry_id!r}")

    def find_by_title(self, title: str) -> OrgEntry:
        for entry in self.iter_entries():
            if entry.title == title:
                return entry
        raise EntryNotFoundError(f"No entry titled {title!r}")

    # Serialisation ---------------------------------------------------------------

    def render(self) -> str:
        lines = list(self.preamble)
        for entry in self.iter_entries():
            lines.extend(entry.own_lines())
        return join_lines(lines)


def parse_org(text: str) -> OrgDocument:
    preamble, roots = parse_entries(text)
    return OrgDocument(preamble, roots)


def load_org_file(path: Path) -> OrgDocument:
    document = parse_org(path.read_text(encoding="utf-8"))
    log.debug("Loaded %s", path)
    return document


def save_org_file(document: OrgDocument, path: Path) -> None:
    path.write_text(document.render(), encoding="utf-8")
    log.debug("Wrote %s", path)


if TYPE_CHECKING:
    from orghash.domain.ports import OutlineDocument

    _document_check: OutlineDocument[OrgEntry] = OrgDocument([], [])
