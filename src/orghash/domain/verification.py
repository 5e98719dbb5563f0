"""Hash lifecycle for outline entries: update, remove, confirm and reconcile."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import DEBUG, getLogger
from typing import TYPE_CHECKING

from orghash.domain.hashing import compute_digest, property_key
from orghash.domain.model import (
    HashAction,
    HashMismatchError,
    HashMismatchesError,
    HashStatus,
    MismatchPolicy,
    PropertyKind,
)

if TYPE_CHECKING:
    from orghash.config.hashing import HashSettings
    from orghash.domain.model import Algorithm
    from orghash.domain.ports import OutlineDocument

log = getLogger(__name__)


@dataclass(slots=True)
class ReconcileResult:
    """Summary of a whole-document update-or-confirm pass."""

    updated: int = 0
    confirmed: int = 0
    mismatches: list[HashMismatchError] = field(default_factory=list)

    @property
    def visited(self) -> int:
        return self.updated + self.confirmed + len(self.mismatches)


def update_hash[TRef](
    document: OutlineDocument[TRef],
    ref: TRef,
    *,
    settings: HashSettings,
    algorithm: Algorithm | str | None = None,
) -> str:
    """Record the current digest of ``ref``, overwriting any previous value."""

    resolved = settings.resolve(algorithm)
    digest = compute_digest(document.get_body(ref), resolved)
    document.put_property(ref, property_key(PropertyKind.HASH, resolved), digest)
    if log.isEnabledFor(DEBUG):
        log.debug("Recorded %s hash for %s", resolved, document.describe(ref))
    return digest


def remove_hash[TRef](
    document: OutlineDocument[TRef],
    ref: TRef,
    *,
    settings: HashSettings,
    algorithm: Algorithm | str | None = None,
) -> bool:
    """Delete the recorded digest of ``ref``; return whether one was present."""

    key = property_key(PropertyKind.HASH, settings.resolve(algorithm))
    if document.get_property(ref, key) is None:
        return False
    document.delete_property(ref, key)
    if log.isEnabledFor(DEBUG):
        log.debug("Removed %s from %s", key, document.describe(ref))
    return True


def _compare[TRef](
    document: OutlineDocument[TRef],
    ref: TRef,
    algorithm: Algorithm,
) -> tuple[HashStatus, HashMismatchError | None]:
    recorded = document.get_property(ref, property_key(PropertyKind.HASH, algorithm))
    if recorded is None:
        return HashStatus.ABSENT, None
    actual = compute_digest(document.get_body(ref), algorithm)
    if recorded == actual:
        return HashStatus.MATCH, None
    mismatch = HashMismatchError(
        ref,
        description=document.describe(ref),
        algorithm=algorithm.value,
        expected=recorded,
        actual=actual,
    )
    return HashStatus.MISMATCH, mismatch


def check_hash[TRef](
    document: OutlineDocument[TRef],
    ref: TRef,
    *,
    settings: HashSettings,
    algorithm: Algorithm | str | None = None,
) -> HashStatus:
    """Compare the recorded digest of ``ref`` with a fresh one without raising."""

    status, _ = _compare(document, ref, settings.resolve(algorithm))
    return status


def confirm_hash[TRef](
    document: OutlineDocument[TRef],
    ref: TRef,
    *,
    settings: HashSettings,
    algorithm: Algorithm | str | None = None,
    raise_on_mismatch: bool = False,
) -> bool:
    """Verify the recorded digest of ``ref``.

    An entry without a recorded digest confirms trivially. On divergence this
    returns ``False``, or raises :class:`HashMismatchError` when
    ``raise_on_mismatch`` is set.
    """

    status, mismatch = _compare(document, ref, settings.resolve(algorithm))
    if mismatch is not None:
        log.warning("%s", mismatch)
        if raise_on_mismatch:
            raise mismatch
        return False
    if status is HashStatus.MATCH and log.isEnabledFor(DEBUG):
        log.debug("Confirmed hash for %s", document.describe(ref))
    return True


def update_or_confirm_hash[TRef](
    document: OutlineDocument[TRef],
    ref: TRef,
    *,
    settings: HashSettings,
    algorithm: Algorithm | str | None = None,
) -> HashAction:
    """Record a digest for an unhashed entry, otherwise verify the recorded one.

    A diverged entry raises :class:`HashMismatchError`; its recorded digest is
    never overwritten here. Use :func:`update_hash` to accept an edit.
    """

    resolved = settings.resolve(algorithm)
    status, mismatch = _compare(document, ref, resolved)
    if mismatch is not None:
        raise mismatch
    if status is HashStatus.ABSENT:
        update_hash(document, ref, settings=settings, algorithm=resolved)
        return HashAction.UPDATED
    return HashAction.CONFIRMED


def update_or_confirm_all[TRef](
    document: OutlineDocument[TRef],
    *,
    settings: HashSettings,
    algorithm: Algorithm | str | None = None,
) -> ReconcileResult:
    """Update or confirm every entry of ``document`` in pre-order.

    With :attr:`MismatchPolicy.FAIL_FAST` the first diverged entry stops the pass
    and later entries stay unvisited. With :attr:`MismatchPolicy.COLLECT` every
    entry is visited and a :class:`HashMismatchesError` is raised at the end.
    Updates applied before an error are kept in both cases.
    """

    resolved = settings.resolve(algorithm)
    result = ReconcileResult()
    for ref in document.iter_entries():
        status, mismatch = _compare(document, ref, resolved)
        if mismatch is not None:
            if settings.mismatch_policy is MismatchPolicy.FAIL_FAST:
                log.error("Stopping reconciliation: %s", mismatch)
                raise mismatch
            log.warning("%s", mismatch)
            result.mismatches.append(mismatch)
        elif status is HashStatus.ABSENT:
            update_hash(document, ref, settings=settings, algorithm=resolved)
            result.updated += 1
        else:
            result.confirmed += 1

    log.info(
        "Reconciled %s entries with %s: updated=%s, confirmed=%s, mismatched=%s",
        result.visited,
        resolved,
        result.updated,
        result.confirmed,
        len(result.mismatches),
    )
    if result.mismatches:
        raise HashMismatchesError(result.mismatches, result=result)
    return result
