from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, ClassVar, Generic, Hashable, Iterable, Sequence, TypeVar

from ..core.enums import RecordKind
from ..core.exceptions import CommitError, CommitInProgressError
from ..store.repository import RecordStore
from .change_set import PendingChangeSet, PendingCounts

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
D = TypeVar("D")
R = TypeVar("R")


class StagingEditor(Generic[K, D, R]):
    """Holds persisted records of one kind plus the pending edits against them.

    Subclasses implement the per-cell toggle and bulk rules; this base owns the
    change set lifecycle: it starts empty, is replaced with an empty one on a
    successful commit or on revert, and is left untouched when a commit fails.
    """

    kind: ClassVar[RecordKind]

    def __init__(self, store: RecordStore, records: Iterable[R] = ()):
        self._store = store
        self._records: list[R] = []
        self._pending: PendingChangeSet[K, D] = PendingChangeSet()
        self._committing = False
        self._set_records(records)

    # --- persisted side ---

    @property
    def records(self) -> Sequence[R]:
        return tuple(self._records)

    async def load(self) -> None:
        """Reload persisted records from the store (pending edits are kept)."""
        records = await self._store.list_all(self.kind)
        self._set_records(records)
        logger.debug("Loaded %d %s records", len(self._records), self.kind.value)

    def _set_records(self, records: Iterable[R]) -> None:
        self._records = list(records)
        self._reindex()

    def _reindex(self) -> None:
        """Rebuild lookup structures after the persisted records change."""

    # --- pending side ---

    @property
    def pending(self) -> PendingChangeSet[K, D]:
        """Snapshot of the pending change set."""
        return self._pending.copy()

    def pending_counts(self) -> PendingCounts:
        return self._pending.counts()

    def has_pending_changes(self) -> bool:
        return not self._pending.is_empty()

    @property
    def is_committing(self) -> bool:
        return self._committing

    def _ensure_idle(self) -> None:
        if self._committing:
            raise CommitInProgressError(f"{self.kind.value} changes are being saved")

    def revert(self) -> None:
        self._ensure_idle()
        self._pending = PendingChangeSet()

    # --- commit ---

    def _draft_for_create(self, draft: D) -> Any:
        return draft

    def _is_persisted(self, key: K) -> bool:
        """True when the store already holds the record a staged addition would create."""
        return False

    def _operations(self, changes: PendingChangeSet[K, D]) -> list[Awaitable[Any]]:
        # Skip work a previous, partly failed commit already did.
        persisted_ids = {record.id for record in self._records}
        ops: list[Awaitable[Any]] = []
        for record_id in sorted(changes.removals):
            if record_id in persisted_ids:
                ops.append(self._store.delete_by_id(self.kind, record_id))
        for key, draft in changes.additions.items():
            if not self._is_persisted(key):
                ops.append(self._store.create(self.kind, self._draft_for_create(draft)))
        for record_id, patch in changes.updates.items():
            ops.append(self._store.update(self.kind, record_id, dict(patch)))
        return ops

    async def _reload_quietly(self) -> bool:
        try:
            await self.load()
        except Exception:
            logger.exception("Reloading %s records failed", self.kind.value)
            return False
        return True

    async def commit(self) -> PendingCounts:
        """Flush every pending change to the store concurrently.

        Returns the counts of the committed change set. Raises CommitError if any
        store operation failed; the change set is kept and only the persisted
        records are reloaded, so a retry does not repeat the writes that went
        through. A failed reload after a successful commit is logged, not raised.
        """
        self._ensure_idle()
        changes = self._pending.copy()
        counts = changes.counts()
        if changes.is_empty():
            return counts

        self._committing = True
        try:
            ops = self._operations(changes)
            logger.info(
                "Saving %s changes: %d removals, %d additions, %d updates (%d store calls)",
                self.kind.value,
                counts.removals,
                counts.additions,
                counts.updates,
                len(ops),
            )
            results = await asyncio.gather(*ops, return_exceptions=True)
        finally:
            self._committing = False

        failures = [r for r in results if isinstance(r, BaseException)]
        if failures:
            logger.error("Saving %s changes failed: %d of %d operations", self.kind.value, len(failures), len(ops))
            await self._reload_quietly()
            raise CommitError(failures, attempted=len(ops)) from failures[0]

        self._pending = PendingChangeSet()
        if not await self._reload_quietly():
            logger.warning("Saved %s changes are not shown until the next load()", self.kind.value)
        logger.info("Saved %d %s changes", counts.total, self.kind.value)
        return counts
