"""Line-preserving parser for org-style outlines."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Iterator

HEADING_RE: Final[re.Pattern[str]] = re.compile(
    r"^(?P<stars>\*+)[ \t]+(?P<title>.*?)(?:[ \t]+(?P<tags>:(?:[\w@#%]+:)+))?[ \t]*$"
)
PLANNING_RE: Final[re.Pattern[str]] = re.compile(r"^[ \t]*(?:SCHEDULED|DEADLINE|CLOSED):")
DRAWER_START_RE: Final[re.Pattern[str]] = re.compile(r"^[ \t]*:PROPERTIES:[ \t]*$", re.IGNORECASE)
DRAWER_END_RE: Final[re.Pattern[str]] = re.compile(r"^[ \t]*:END:[ \t]*$", re.IGNORECASE)
PROPERTY_RE: Final[re.Pattern[str]] = re.compile(
    r"^(?P<indent>[ \t]*):(?P<key>[^\s:]+):(?:[ \t]+(?P<value>.*?))?[ \t]*$"
)


def _strip_eol(line: str) -> str:
    return line.rstrip("\r\n")


def _eol(line: str) -> str:
    return line[len(_strip_eol(line)) :]


@dataclass(eq=False, slots=True)
class OrgEntry:
    """A heading together with its planning line, property drawer, text and children.

    Lines keep their original line endings so an untouched entry renders back
    byte for byte. ``drawer`` holds the lines between ``:PROPERTIES:`` and
    ``:END:``; ``None`` means the entry has no drawer.
    """

    level: int
    title: str
    tags: list[str]
    heading: str
    planning: list[str] = field(default_factory=list)
    drawer_open: str = ":PROPERTIES:\n"
    drawer: list[str] | None = None
    drawer_close: str = ":END:\n"
    lines: list[str] = field(default_factory=list)
    children: list[OrgEntry] = field(default_factory=list)
    parent: OrgEntry | None = field(default=None, repr=False)

    def own_lines(self) -> list[str]:
        out = [self.heading, *self.planning]
        if self.drawer is not None:
            out.extend((self.drawer_open, *self.drawer, self.drawer_close))
        out.extend(self.lines)
        return out

    def walk(self) -> Iterator[OrgEntry]:
        yield self
        for child in self.children:
            yield from child.walk()

    def render_heading(self) -> None:
        eol = _eol(self.heading) or "\n"
        text = f"{'*' * self.level} {self.title}".rstrip()
        if self.tags:
            text = f"{text} :{':'.join(self.tags)}:"
        self.heading = f"{text}{eol}"


def join_lines(lines: list[str]) -> str:
    """Concatenate lines, inserting a newline where a line without one is followed by more."""

    parts: list[str] = []
    for index, line in enumerate(lines):
        parts.append(line)
        if index < len(lines) - 1 and not _eol(line):
            parts.append("\n")
    return "".join(parts)


def parse_property_line(line: str) -> tuple[str, str] | None:
    match = PROPERTY_RE.match(_strip_eol(line))
    if match is None:
        return None
    return match.group("key"), match.group("value") or ""


def _parse_heading(line: str) -> OrgEntry | None:
    match = HEADING_RE.match(_strip_eol(line))
    if match is None:
        return None
    raw_tags = match.group("tags")
    tags = [tag for tag in raw_tags.split(":") if tag] if raw_tags else []
    return OrgEntry(
        level=len(match.group("stars")),
        title=match.group("title"),
        tags=tags,
        heading=line,
    )


def _attach_metadata(entry: OrgEntry, lines: list[str]) -> None:
    index = 0
    if index < len(lines) and PLANNING_RE.match(lines[index]):
        entry.planning.append(lines[index])
        index += 1
    if index < len(lines) and DRAWER_START_RE.match(_strip_eol(lines[index])):
        for end in range(index + 1, len(lines)):
            if DRAWER_END_RE.match(_strip_eol(lines[end])):
                entry.drawer_open = lines[index]
                entry.drawer = lines[index + 1 : end]
                entry.drawer_close = lines[end]
                index = end + 1
                break
    entry.lines = lines[index:]


def parse_entries(text: str) -> tuple[list[str], list[OrgEntry]]:
    """Split ``text`` into preamble lines and a forest of top-level entries."""

    preamble: list[str] = []
    roots: list[OrgEntry] = []
    stack: list[OrgEntry] = []
    pending: list[str] = preamble
    current: OrgEntry | None = None

    for line in text.splitlines(keepends=True):
        entry = _parse_heading(line)
        if entry is None:
            pending.append(line)
            continue

        if current is not None:
            _attach_metadata(current, pending)
        current = entry
        pending = []

        while stack and stack[-1].level >= entry.level:
            stack.pop()
        if stack:
            entry.parent = stack[-1]
            stack[-1].children.append(entry)
        else:
            roots.append(entry)
        stack.append(entry)

    if current is not None:
        _attach_metadata(current, pending)
    return preamble, roots
