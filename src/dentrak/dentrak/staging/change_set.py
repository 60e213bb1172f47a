from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Hashable, Iterable, Mapping, Optional, Set, TypeVar

K = TypeVar("K", bound=Hashable)
D = TypeVar("D")


@dataclass(frozen=True)
class PendingCounts:
    """Read-only view for "N unsaved changes" indicators."""

    additions: int = 0
    removals: int = 0
    updates: int = 0

    @property
    def total(self) -> int:
        return self.additions + self.removals + self.updates

    def __add__(self, other: "PendingCounts") -> "PendingCounts":
        return PendingCounts(
            additions=self.additions + other.additions,
            removals=self.removals + other.removals,
            updates=self.updates + other.updates,
        )


@dataclass
class PendingChangeSet(Generic[K, D]):
    """Staging area for edits not yet written to the store.

    - additions: cell key -> draft record (no store id yet)
    - removals: persisted ids marked for deletion
    - updates: persisted id -> partial field patch

    A removed id never carries an update: staging a removal drops the update,
    and updates for removed ids are ignored.
    """

    additions: Dict[K, D] = field(default_factory=dict)
    removals: Set[int] = field(default_factory=set)
    updates: Dict[int, Dict[str, Any]] = field(default_factory=dict)

    # --- additions ---

    def addition(self, key: K) -> Optional[D]:
        return self.additions.get(key)

    def stage_addition(self, key: K, draft: D) -> None:
        self.additions[key] = draft

    def unstage_addition(self, key: K) -> bool:
        return self.additions.pop(key, None) is not None

    # --- removals ---

    def is_removed(self, record_id: int) -> bool:
        return record_id in self.removals

    def stage_removal(self, record_id: int) -> bool:
        self.updates.pop(record_id, None)
        if record_id in self.removals:
            return False
        self.removals.add(record_id)
        return True

    def unstage_removal(self, record_id: int) -> bool:
        if record_id not in self.removals:
            return False
        self.removals.discard(record_id)
        return True

    def unstage_removals(self, record_ids: Iterable[int]) -> int:
        return sum(1 for record_id in record_ids if self.unstage_removal(record_id))

    # --- updates ---

    def update_for(self, record_id: int) -> Mapping[str, Any]:
        return self.updates.get(record_id, {})

    def stage_update(self, record_id: int, **changes: Any) -> bool:
        if record_id in self.removals:
            return False
        patch = self.updates.setdefault(record_id, {})
        patch.update(changes)
        return True

    def clear_update(self, record_id: int, *fields: str) -> None:
        """Drop the whole patch, or only the named fields of it."""
        if not fields:
            self.updates.pop(record_id, None)
            return

        patch = self.updates.get(record_id)
        if patch is None:
            return
        for name in fields:
            patch.pop(name, None)
        if not patch:
            del self.updates[record_id]

    # --- whole set ---

    def is_empty(self) -> bool:
        return not (self.additions or self.removals or self.updates)

    def counts(self) -> PendingCounts:
        return PendingCounts(
            additions=len(self.additions),
            removals=len(self.removals),
            updates=len(self.updates),
        )

    def copy(self) -> "PendingChangeSet[K, D]":
        return PendingChangeSet(
            additions=dict(self.additions),
            removals=set(self.removals),
            updates={record_id: dict(patch) for record_id, patch in self.updates.items()},
        )
