"""SQLAlchemy-backed content-addressed store."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy import create_engine, insert, select
from sqlalchemy.exc import SQLAlchemyError

from orghash.adapters.sqlalchemy.mappings import content_blob_table
from orghash.adapters.sqlalchemy.migrations import upgrade_head
from orghash.config import get_database_config
from orghash.domain.hashing import digest_bytes
from orghash.domain.model import Algorithm, ContentStoreError

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from orghash.domain.ports import ContentStore

log = getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when the SQLAlchemy store is used before initialisation."""


@dataclass(slots=True)
class _AdapterState:
    engine: Engine | None = None


_STATE = _AdapterState()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Initialise the SQLAlchemy engine and bring the schema to the latest revision."""

    if _STATE.engine is not None and not force:
        raise StartupError(
            "SQLAlchemy adapter already initialised. Pass force=True to reconfigure."
        )

    resolved_engine = engine or create_engine(
        database_uri or get_database_config().uri, future=True
    )
    upgrade_head(engine=resolved_engine)
    _STATE.engine = resolved_engine


def configured_engine() -> Engine | None:
    """Return the engine currently managed by the adapter (if any)."""

    return _STATE.engine


def is_started() -> bool:
    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the managed engine and reset state (primarily for tests)."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.engine = None


class SqlAlchemyContentStore:
    """Stores blobs in the ``content_blob`` table keyed by their own digest."""

    def __init__(self, engine: Engine | None = None) -> None:
        resolved = engine or _STATE.engine
        if resolved is None:
            raise StartupError(
                "SQLAlchemy adapter not initialised. Call orghash.adapters.sqlalchemy."
                "content_store.startup() before creating a content store."
            )
        self.engine = resolved

    def save(self, content: bytes, algorithm: Algorithm) -> str:
        resolved = Algorithm.parse(algorithm)
        handle = digest_bytes(content, resolved)
        try:
            with self.engine.begin() as connection:
                existing = connection.execute(
                    select(content_blob_table.c.handle)
                    .where(content_blob_table.c.algorithm == resolved.value)
                    .where(content_blob_table.c.handle == handle)
                ).scalar_one_or_none()
                if existing is None:
                    connection.execute(
                        insert(content_blob_table).values(
                            algorithm=resolved.value,
                            handle=handle,
                            content=content,
                            size=len(content),
                            stored_at=datetime.now(UTC),
                        )
                    )
        except SQLAlchemyError as exc:
            raise ContentStoreError(f"Saving blob {handle} failed: {exc}") from exc

        if existing is None:
            log.debug("Stored %s bytes as %s %s", len(content), resolved, handle)
        else:
            log.debug("Blob %s %s already stored", resolved, handle)
        return handle

    def get(self, handle: str, algorithm: Algorithm) -> bytes | None:
        resolved = Algorithm.parse(algorithm)
        try:
            with self.engine.connect() as connection:
                content = connection.execute(
                    select(content_blob_table.c.content)
                    .where(content_blob_table.c.algorithm == resolved.value)
                    .where(content_blob_table.c.handle == handle.strip().lower())
                ).scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise ContentStoreError(f"Fetching blob {handle} failed: {exc}") from exc
        return None if content is None else bytes(content)


if TYPE_CHECKING:
    _store_check: ContentStore = SqlAlchemyContentStore()
