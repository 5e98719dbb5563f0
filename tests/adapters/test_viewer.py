from __future__ import annotations

import subprocess
from typing import TYPE_CHECKING

from orghash.adapters.viewer import FileDocumentOpener
from orghash.domain.model import Algorithm

if TYPE_CHECKING:
    from pathlib import Path

    import pytest


def test_opener_writes_content_to_new_file(tmp_path: Path) -> None:
    opener = FileDocumentOpener(directory=tmp_path / "visits")

    location = opener(b"* Archived\n", handle="abc", algorithm=Algorithm.MD5)

    assert location == str(tmp_path / "visits" / "md5-abc.org")
    assert (tmp_path / "visits" / "md5-abc.org").read_bytes() == b"* Archived\n"


def test_opener_hands_file_to_editor(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[list[str]] = []

    def fake_run(args: list[str], *, check: bool) -> None:
        assert check
        calls.append(args)

    monkeypatch.setattr(subprocess, "run", fake_run)
    opener = FileDocumentOpener(directory=tmp_path, editor="emacsclient -n")

    location = opener(b"x", handle="h", algorithm=Algorithm.SHA1)

    assert calls == [["emacsclient", "-n", location]]
