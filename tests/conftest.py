from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.pool import StaticPool

from orghash.adapters.sqlalchemy import shutdown, startup
from orghash.config import HashSettings

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Iterator

SAMPLE_ORG = """#+TITLE: Project notes

* Planning :work:
:PROPERTIES:
:ID: plan-1
:CREATED: [2024-03-01 Fri 09:00]
:END:
Task details
** Milestones
- first
- second
* Journal
Some thoughts.
"""


@pytest.fixture
def settings() -> HashSettings:
    return HashSettings()


@pytest.fixture
def sample_org() -> str:
    return SAMPLE_ORG


@pytest.fixture
def org_file(tmp_path: Path) -> Path:
    path = tmp_path / "notes.org"
    path.write_text(SAMPLE_ORG, encoding="utf-8")
    return path


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def started_store_engine(sqlite_engine: Engine) -> Iterator[Engine]:
    startup(engine=sqlite_engine, force=True)
    try:
        yield sqlite_engine
    finally:
        shutdown()


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in (
        "ORGHASH_ALGORITHM",
        "ORGHASH_MISMATCH_POLICY",
        "ORGHASH_ARCHIVE_TAG",
        "ORGHASH_STORE",
        "ORGHASH_STORE_URL",
        "ORGHASH_STORE_TIMEOUT",
        "ORGHASH_EDITOR",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("ORGHASH_DATA_DIR", str(tmp_path / "data"))
