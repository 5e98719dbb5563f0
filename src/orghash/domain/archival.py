"""Move entry bodies into a content-addressed store and bring them back."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Final

from orghash.domain.hashing import property_key
from orghash.domain.model import ArchivedContentMissingError, PropertyKind
from orghash.domain.verification import confirm_hash

if TYPE_CHECKING:
    from collections.abc import Iterable

    from orghash.config.hashing import HashSettings
    from orghash.domain.model import Algorithm
    from orghash.domain.ports import ContentStore, DocumentOpener, OutlineDocument

log = getLogger(__name__)

STORED_TAG: Final[str] = "STORED"
PRESERVED_PROPERTIES: Final[tuple[str, ...]] = ("ID", "CREATED")


def _merge_tags(existing: Iterable[str], *extra: str) -> list[str]:
    merged: list[str] = []
    for tag in (*existing, *extra):
        if tag not in merged:
            merged.append(tag)
    return merged


def archive_entry[TRef](
    document: OutlineDocument[TRef],
    ref: TRef,
    *,
    store: ContentStore,
    settings: HashSettings,
    algorithm: Algorithm | str | None = None,
) -> str:
    """Save the body of ``ref`` to ``store`` and replace it with a handle.

    An entry archived before must still match its recorded hash; otherwise
    :class:`HashMismatchError` is raised and nothing changes. The body is only
    deleted after the store accepted it.
    """

    resolved = settings.resolve(algorithm)
    stored_key = property_key(PropertyKind.STORED, resolved)

    if document.get_property(ref, stored_key) is not None:
        confirm_hash(document, ref, settings=settings, algorithm=resolved, raise_on_mismatch=True)
        document.delete_property(ref, stored_key)

    body = document.get_body(ref)
    handle = store.save(body.encode("utf-8"), resolved)
    log.info("Archived %s as %s %s", document.describe(ref), resolved, handle)

    preserved = {
        key: value
        for key in PRESERVED_PROPERTIES
        if (value := document.get_property(ref, key)) is not None
    }
    document.delete_body(ref)
    for key, value in preserved.items():
        document.put_property(ref, key, value)

    document.put_property(ref, stored_key, handle)
    document.set_tags(ref, _merge_tags(document.get_tags(ref), settings.archive_tag, STORED_TAG))
    return handle


def visit_archive[TRef](
    document: OutlineDocument[TRef],
    ref: TRef,
    *,
    store: ContentStore,
    opener: DocumentOpener,
    settings: HashSettings,
    algorithm: Algorithm | str | None = None,
) -> str | None:
    """Open the archived content of ``ref``; return ``None`` if it was never archived."""

    resolved = settings.resolve(algorithm)
    handle = document.get_property(ref, property_key(PropertyKind.STORED, resolved))
    if handle is None:
        log.info("%s has no %s archive", document.describe(ref), resolved)
        return None

    content = store.get(handle, resolved)
    if content is None:
        raise ArchivedContentMissingError(handle, algorithm=resolved.value)
    return opener(content, handle=handle, algorithm=resolved)
