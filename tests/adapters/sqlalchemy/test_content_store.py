from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine, func, inspect, select

from orghash.adapters.sqlalchemy import (
    SqlAlchemyContentStore,
    StartupError,
    configured_engine,
    content_blob_table,
    shutdown,
    startup,
)
from orghash.domain.hashing import digest_bytes
from orghash.domain.model import Algorithm

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.engine import Engine


@pytest.fixture(autouse=True)
def reset_adapter_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


def test_store_requires_startup() -> None:
    with pytest.raises(StartupError):
        SqlAlchemyContentStore()


def test_startup_requires_force_for_reconfiguration() -> None:
    engine_a = create_engine("sqlite+pysqlite:///:memory:", future=True)
    engine_b = create_engine("sqlite+pysqlite:///:memory:", future=True)

    startup(engine=engine_a, force=True)

    with pytest.raises(StartupError):
        startup(engine=engine_b)

    startup(engine=engine_b, force=True)
    assert configured_engine() is engine_b


def test_startup_runs_migrations(started_store_engine: Engine) -> None:
    tables = inspect(started_store_engine).get_table_names()

    assert "content_blob" in tables
    assert "alembic_version" in tables


def test_save_and_get_round_trip(started_store_engine: Engine) -> None:
    store = SqlAlchemyContentStore()
    content = "* Entry\nbody\n".encode()

    handle = store.save(content, Algorithm.SHA256)

    assert handle == digest_bytes(content, Algorithm.SHA256)
    assert store.get(handle, Algorithm.SHA256) == content
    assert store.get(handle, Algorithm.SHA1) is None
    assert SqlAlchemyContentStore(started_store_engine).get(handle, Algorithm.SHA256) == content


def test_save_is_idempotent_for_identical_content(started_store_engine: Engine) -> None:
    store = SqlAlchemyContentStore()

    first = store.save(b"same", Algorithm.MD5)
    second = store.save(b"same", Algorithm.MD5)

    assert first == second
    with started_store_engine.connect() as connection:
        count = connection.execute(
            select(func.count()).select_from(content_blob_table)
        ).scalar_one()
    assert count == 1


def test_get_unknown_handle_returns_none(started_store_engine: Engine) -> None:
    _ = started_store_engine

    assert SqlAlchemyContentStore().get("0" * 64, Algorithm.SHA256) is None
