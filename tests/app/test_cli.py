from __future__ import annotations

import hashlib
import logging
from typing import TYPE_CHECKING

import pytest

from orghash import app as app_module
from orghash.adapters.org import load_org_file
from orghash.adapters.sqlalchemy import shutdown
from orghash.domain.model import Algorithm, ContentStoreError
from orghash.ui import cli
from tests.helpers.outline import InMemoryContentStore

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


@pytest.fixture(autouse=True)
def file_backed_store(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.delenv("DATABASE_URI", raising=False)
    shutdown()
    yield
    shutdown()


def _exit_code(argv: list[str]) -> int | str | None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(argv)
    return excinfo.value.code


def test_update_writes_hash_property(org_file: Path) -> None:
    cli.main(["update", str(org_file), "--title", "Journal"])

    document = load_org_file(org_file)
    journal = document.find_by_title("Journal")
    expected = hashlib.sha256(b"* Journal\nSome thoughts.\n").hexdigest()
    assert document.get_property(journal, "HASH_sha256") == expected


def test_confirm_detects_edit_with_exit_code(org_file: Path) -> None:
    cli.main(["update", str(org_file), "--id", "plan-1", "--algorithm", "sha1"])
    cli.main(["confirm", str(org_file), "--id", "plan-1", "-a", "sha1"])

    org_file.write_text(
        org_file.read_text(encoding="utf-8").replace("Task details", "Task details!"),
        encoding="utf-8",
    )

    assert _exit_code(["confirm", str(org_file), "--id", "plan-1", "-a", "sha1"]) == 1


def test_confirm_reports_missing_hash(org_file: Path, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="orghash.ui.cli")

    cli.main(["confirm", str(org_file), "--title", "Journal"])

    assert "No hash recorded" in caplog.messages
    assert "Hash confirmed" not in caplog.messages

    caplog.clear()
    cli.main(["update", str(org_file), "--title", "Journal"])
    cli.main(["confirm", str(org_file), "--title", "Journal"])

    assert "Hash confirmed" in caplog.messages


def test_remove_deletes_hash(org_file: Path, sample_org: str) -> None:
    cli.main(["update", str(org_file), "--line", "12"])
    cli.main(["remove", str(org_file), "--line", "12"])

    assert org_file.read_text(encoding="utf-8") == sample_org


def test_update_or_confirm_all_keeps_progress_before_mismatch(org_file: Path) -> None:
    cli.main(["update", str(org_file), "--title", "Milestones"])
    text = org_file.read_text(encoding="utf-8").replace("- second", "- second, changed")
    org_file.write_text(text, encoding="utf-8")

    assert _exit_code(["update-or-confirm-all", str(org_file)]) == 1

    document = load_org_file(org_file)
    planning = document.find_by_title("Planning")
    journal = document.find_by_title("Journal")
    assert document.get_property(planning, "HASH_sha256") is not None
    assert document.get_property(journal, "HASH_sha256") is None


def test_update_or_confirm_single_entry(org_file: Path) -> None:
    cli.main(["update-or-confirm", str(org_file), "--title", "Journal"])
    cli.main(["update-or-confirm", str(org_file), "--title", "Journal"])

    text = org_file.read_text(encoding="utf-8")
    assert text.count(":HASH_sha256:") == 1


def test_archive_and_visit_round_trip(org_file: Path, tmp_path: Path) -> None:
    original_body = load_org_file(org_file).get_body(
        load_org_file(org_file).find_by_title("Planning")
    )

    cli.main(["archive", str(org_file), "--id", "plan-1"])

    document = load_org_file(org_file)
    planning = document.find_by_id("plan-1")
    handle = document.get_property(planning, "STORED_sha256")
    assert handle is not None
    assert planning.tags == ["work", "ARCHIVE", "STORED"]
    assert document.find_by_title("Journal") is not None

    cli.main(["visit", str(org_file), "--id", "plan-1"])

    visited = tmp_path / "data" / "visits" / f"sha256-{handle}.org"
    assert visited.read_text(encoding="utf-8") == original_body


def test_archive_store_failure_leaves_file_untouched(
    org_file: Path, sample_org: str, monkeypatch: pytest.MonkeyPatch
) -> None:
    class BrokenStore(InMemoryContentStore):
        def save(self, content: bytes, algorithm: Algorithm) -> str:
            raise ContentStoreError("offline")

    monkeypatch.setattr(app_module, "build_content_store", BrokenStore)

    assert _exit_code(["archive", str(org_file), "--id", "plan-1"]) == 1
    assert org_file.read_text(encoding="utf-8") == sample_org


def test_visit_missing_content_exits_with_error(org_file: Path) -> None:
    document = load_org_file(org_file)
    document.put_property(document.find_by_title("Journal"), "STORED_sha256", "0" * 64)
    org_file.write_text(document.render(), encoding="utf-8")

    assert _exit_code(["visit", str(org_file), "--title", "Journal"]) == 1


@pytest.mark.parametrize(
    "argv",
    [
        ["update", "{file}", "--title", "Journal", "--algorithm", "sha3"],
        ["update", "{file}", "--title", "Nope"],
        ["update", "{file}", "--line", "0"],
        ["update", "{missing}", "--title", "Journal"],
    ],
)
def test_validation_errors_exit_with_code_two(
    org_file: Path, tmp_path: Path, argv: list[str]
) -> None:
    resolved = [
        arg.format(file=org_file, missing=tmp_path / "missing.org") for arg in argv
    ]

    assert _exit_code(resolved) == 2


def test_entry_commands_require_a_selector(org_file: Path) -> None:
    assert _exit_code(["update", str(org_file)]) == 2
