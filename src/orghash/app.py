"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from contextlib import AbstractContextManager, ExitStack, contextmanager
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from orghash.adapters.http_store import HttpContentStore
from orghash.adapters.org import EntryNotFoundError, load_org_file, save_org_file
from orghash.adapters.sqlalchemy import SqlAlchemyContentStore, is_started, startup
from orghash.adapters.viewer import FileDocumentOpener
from orghash.config import (
    StoreBackend,
    get_content_store_config,
    get_hash_settings,
    get_storage_config,
    optional_env_var,
)
from orghash.domain.archival import archive_entry, visit_archive
from orghash.domain.verification import (
    check_hash,
    confirm_hash,
    remove_hash,
    update_hash,
    update_or_confirm_all,
    update_or_confirm_hash,
)

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from orghash.adapters.org import OrgDocument, OrgEntry
    from orghash.config import ContentStoreConfig, HashSettings
    from orghash.domain.model import Algorithm, HashAction, HashStatus
    from orghash.domain.ports import ContentStore, DocumentOpener
    from orghash.domain.verification import ReconcileResult

StoreFactory = Callable[[], "ContentStore"]

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EntrySelector:
    """Identifies one entry of a document by ``ID`` property, exact title or line."""

    entry_id: str | None = None
    title: str | None = None
    line: int | None = None

    def resolve(self, document: OrgDocument) -> OrgEntry:
        if self.entry_id is not None:
            return document.find_by_id(self.entry_id)
        if self.title is not None:
            return document.find_by_title(self.title)
        if self.line is not None:
            return document.entry_at_line(self.line)
        raise EntryNotFoundError("No entry selector given (use --id, --title or --line)")


def build_content_store(config: ContentStoreConfig | None = None) -> ContentStore:
    """Create the content store selected by configuration."""

    effective = config or get_content_store_config()
    if effective.backend is StoreBackend.HTTP:
        return HttpContentStore.from_config(effective)
    if not is_started():
        startup()
    return SqlAlchemyContentStore()


def build_document_opener() -> DocumentOpener:
    return FileDocumentOpener(
        directory=get_storage_config().visit_dir(ensure=False),
        editor=optional_env_var("ORGHASH_EDITOR"),
    )


@contextmanager
def _opened_store(store_factory: StoreFactory | None) -> Iterator[ContentStore]:
    """Build a content store and release its resources (e.g. an HTTP client) on exit."""

    with ExitStack() as stack:
        store = (store_factory or build_content_store)()
        if isinstance(store, AbstractContextManager):
            stack.enter_context(store)
        yield store


@contextmanager
def _editing(path: Path, *, save_on_error: bool = False) -> Iterator[OrgDocument]:
    document = load_org_file(path)
    original = document.render()
    try:
        yield document
    except Exception:
        if save_on_error and document.render() != original:
            log.info("Keeping changes applied before the error in %s", path)
            save_org_file(document, path)
        raise
    if document.render() != original:
        save_org_file(document, path)


def hash_entry(
    path: Path,
    selector: EntrySelector,
    *,
    algorithm: Algorithm | str | None = None,
    settings: HashSettings | None = None,
) -> str:
    """Record a fresh hash on the selected entry, overwriting any existing one."""

    effective = settings or get_hash_settings()
    with _editing(path) as document:
        return update_hash(
            document, selector.resolve(document), settings=effective, algorithm=algorithm
        )


def unhash_entry(
    path: Path,
    selector: EntrySelector,
    *,
    algorithm: Algorithm | str | None = None,
    settings: HashSettings | None = None,
) -> bool:
    effective = settings or get_hash_settings()
    with _editing(path) as document:
        return remove_hash(
            document, selector.resolve(document), settings=effective, algorithm=algorithm
        )


def confirm_entry(
    path: Path,
    selector: EntrySelector,
    *,
    algorithm: Algorithm | str | None = None,
    settings: HashSettings | None = None,
    strict: bool = True,
) -> bool:
    """Verify the selected entry; ``strict`` raises on divergence instead of returning False."""

    effective = settings or get_hash_settings()
    document = load_org_file(path)
    return confirm_hash(
        document,
        selector.resolve(document),
        settings=effective,
        algorithm=algorithm,
        raise_on_mismatch=strict,
    )


def check_entry(
    path: Path,
    selector: EntrySelector,
    *,
    algorithm: Algorithm | str | None = None,
    settings: HashSettings | None = None,
) -> HashStatus:
    effective = settings or get_hash_settings()
    document = load_org_file(path)
    return check_hash(
        document, selector.resolve(document), settings=effective, algorithm=algorithm
    )


def reconcile_entry(
    path: Path,
    selector: EntrySelector,
    *,
    algorithm: Algorithm | str | None = None,
    settings: HashSettings | None = None,
) -> HashAction:
    effective = settings or get_hash_settings()
    with _editing(path) as document:
        return update_or_confirm_hash(
            document, selector.resolve(document), settings=effective, algorithm=algorithm
        )


def reconcile_file(
    path: Path,
    *,
    algorithm: Algorithm | str | None = None,
    settings: HashSettings | None = None,
) -> ReconcileResult:
    """Update or confirm every entry of ``path``; updates made before a mismatch are kept."""

    effective = settings or get_hash_settings()
    log.info("Reconciling %s (policy=%s)", path, effective.mismatch_policy)
    with _editing(path, save_on_error=True) as document:
        return update_or_confirm_all(document, settings=effective, algorithm=algorithm)


def archive_file_entry(
    path: Path,
    selector: EntrySelector,
    *,
    algorithm: Algorithm | str | None = None,
    settings: HashSettings | None = None,
    store_factory: StoreFactory | None = None,
) -> str:
    """Move the selected entry's body into the content store; return its handle."""

    effective = settings or get_hash_settings()
    with _opened_store(store_factory) as store, _editing(path) as document:
        return archive_entry(
            document,
            selector.resolve(document),
            store=store,
            settings=effective,
            algorithm=algorithm,
        )


def visit_file_entry(
    path: Path,
    selector: EntrySelector,
    *,
    algorithm: Algorithm | str | None = None,
    settings: HashSettings | None = None,
    store_factory: StoreFactory | None = None,
    opener: DocumentOpener | None = None,
) -> str | None:
    """Fetch the archived body of the selected entry and open it as a new document."""

    effective = settings or get_hash_settings()
    document = load_org_file(path)
    ref = selector.resolve(document)
    with _opened_store(store_factory) as store:
        return visit_archive(
            document,
            ref,
            store=store,
            opener=opener or build_document_opener(),
            settings=effective,
            algorithm=algorithm,
        )
