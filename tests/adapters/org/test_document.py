from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from orghash.adapters.org import (
    EntryNotFoundError,
    load_org_file,
    parse_org,
    save_org_file,
)

if TYPE_CHECKING:
    from pathlib import Path


def test_unmodified_document_round_trips(sample_org: str) -> None:
    assert parse_org(sample_org).render() == sample_org


def test_round_trip_preserves_missing_final_newline() -> None:
    text = "* One\nbody\n* Two"

    assert parse_org(text).render() == text


def test_entries_are_yielded_in_pre_order(sample_org: str) -> None:
    document = parse_org(sample_org)

    titles = [entry.title for entry in document.iter_entries()]

    assert titles == ["Planning", "Milestones", "Journal"]
    assert [entry.title for entry in document.iter_entries()] == titles


def test_heading_tags_and_levels_are_parsed(sample_org: str) -> None:
    document = parse_org(sample_org)
    planning, milestones, _ = document.iter_entries()

    assert (planning.level, planning.tags) == (1, ["work"])
    assert milestones.level == 2
    assert milestones.parent is planning


def test_body_spans_subtree_up_to_next_sibling(sample_org: str) -> None:
    document = parse_org(sample_org)

    body = document.get_body(document.find_by_title("Planning"))

    assert body.startswith("* Planning :work:\n")
    assert body.endswith("** Milestones\n- first\n- second\n")
    assert "Journal" not in body


def test_body_of_last_entry_ends_with_newline() -> None:
    document = parse_org("* Only\ntext")

    assert document.get_body(document.find_by_title("Only")) == "* Only\ntext\n"


def test_property_access_is_case_insensitive(sample_org: str) -> None:
    document = parse_org(sample_org)
    planning = document.find_by_title("Planning")

    assert document.get_property(planning, "ID") == "plan-1"
    assert document.get_property(planning, "id") == "plan-1"
    assert document.get_property(planning, "MISSING") is None


def test_put_property_creates_and_removes_drawer() -> None:
    document = parse_org("* Entry\ntext\n")
    entry = document.find_by_title("Entry")

    document.put_property(entry, "HASH_sha1", "abc")
    assert document.render() == "* Entry\n:PROPERTIES:\n:HASH_sha1: abc\n:END:\ntext\n"

    document.put_property(entry, "HASH_sha1", "def")
    assert document.get_property(entry, "HASH_sha1") == "def"

    document.delete_property(entry, "HASH_sha1")
    assert document.render() == "* Entry\ntext\n"


def test_put_property_on_heading_without_newline() -> None:
    document = parse_org("* Entry")
    entry = document.find_by_title("Entry")

    document.put_property(entry, "ID", "x")

    assert document.render() == "* Entry\n:PROPERTIES:\n:ID: x\n:END:\n"


def test_drawer_after_planning_line_is_recognised() -> None:
    text = "* TODO Task\nSCHEDULED: <2024-05-01 Wed>\n:PROPERTIES:\n:ID: t1\n:END:\nNotes\n"
    document = parse_org(text)
    entry = document.find_by_id("t1")

    assert entry.planning == ["SCHEDULED: <2024-05-01 Wed>\n"]
    assert entry.lines == ["Notes\n"]


def test_delete_body_keeps_only_heading(sample_org: str) -> None:
    document = parse_org(sample_org)
    planning = document.find_by_title("Planning")

    document.delete_body(planning)

    assert document.get_body(planning) == "* Planning :work:\n"
    assert [entry.title for entry in document.iter_entries()] == ["Planning", "Journal"]


def test_set_tags_rewrites_heading_without_duplicates(sample_org: str) -> None:
    document = parse_org(sample_org)
    journal = document.find_by_title("Journal")

    document.set_tags(journal, ["daily", "STORED", "daily"])

    assert journal.heading == "* Journal :daily:STORED:\n"
    assert document.get_tags(journal) == ["daily", "STORED"]


def test_lookups_by_line_and_description(sample_org: str) -> None:
    document = parse_org(sample_org)

    assert document.entry_at_line(3).title == "Planning"
    assert document.entry_at_line(8).title == "Planning"
    assert document.entry_at_line(10).title == "Milestones"
    assert document.entry_at_line(12).title == "Journal"
    assert document.describe(document.find_by_title("Journal")) == "line 12: * Journal"


@pytest.mark.parametrize("line", [1, 2, 99])
def test_entry_at_line_outside_entries_raises(sample_org: str, line: int) -> None:
    with pytest.raises(EntryNotFoundError):
        parse_org(sample_org).entry_at_line(line)


def test_unknown_selectors_raise(sample_org: str) -> None:
    document = parse_org(sample_org)

    with pytest.raises(EntryNotFoundError):
        document.find_by_id("nope")
    with pytest.raises(EntryNotFoundError):
        document.find_by_title("Nope")


def test_file_helpers_round_trip(org_file: Path, sample_org: str) -> None:
    document = load_org_file(org_file)
    document.put_property(document.find_by_title("Journal"), "ID", "j-1")

    save_org_file(document, org_file)

    reloaded = org_file.read_text(encoding="utf-8")
    assert reloaded != sample_org
    assert load_org_file(org_file).find_by_id("j-1").title == "Journal"
