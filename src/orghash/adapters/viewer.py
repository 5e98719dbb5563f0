"""Open archived content as a new file on disk."""

from __future__ import annotations

import shlex
import subprocess
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from orghash.domain.model import Algorithm
    from orghash.domain.ports import DocumentOpener

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FileDocumentOpener:
    """Write fetched content to ``<directory>/<algorithm>-<handle>.org``.

    When ``editor`` is set (a shell-style command such as ``"emacsclient -n"``)
    the file is handed to it after writing.
    """

    directory: Path
    editor: str | None = None

    def __call__(self, content: bytes, *, handle: str, algorithm: Algorithm) -> str:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.directory / f"{algorithm}-{handle}.org"
        path.write_bytes(content)
        log.info("Opened archived content at %s", path)
        if self.editor:
            subprocess.run([*shlex.split(self.editor), str(path)], check=True)  # noqa: S603
        return str(path)


if TYPE_CHECKING:
    from pathlib import Path as _Path

    _opener_check: DocumentOpener = FileDocumentOpener(directory=_Path())
