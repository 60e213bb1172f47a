from __future__ import annotations

import asyncio
import dataclasses
import logging
from typing import Any, Iterable, Mapping, Sequence

from ..core.enums import RecordKind
from ..core.exceptions import RecordNotFoundError, ValidationError

logger = logging.getLogger(__name__)


class InMemoryRecordStore:
    """Key-ordered record store kept in process memory.

    Ids are assigned per kind from an auto-increment counter starting at 1, so
    `list_all` returns records in insertion order.
    """

    def __init__(self):
        self._tables: dict[RecordKind, dict[int, Any]] = {kind: {} for kind in RecordKind}
        self._next_id: dict[RecordKind, int] = {kind: 1 for kind in RecordKind}

    def seed(self, kind: RecordKind, drafts: Iterable[Any]) -> list[int]:
        """Synchronously insert drafts; used for demos and tests."""
        return [self._insert(kind, draft) for draft in drafts]

    def get(self, kind: RecordKind, record_id: int) -> Any:
        return self._tables[kind].get(int(record_id))

    def _insert(self, kind: RecordKind, draft: Any) -> int:
        record_id = self._next_id[kind]
        self._next_id[kind] = record_id + 1
        self._tables[kind][record_id] = draft.to_record(record_id)
        return record_id

    async def list_all(self, kind: RecordKind) -> Sequence[Any]:
        await asyncio.sleep(0)
        table = self._tables[kind]
        return [table[k] for k in sorted(table)]

    async def create(self, kind: RecordKind, draft: Any) -> int:
        await asyncio.sleep(0)
        record_id = self._insert(kind, draft)
        logger.debug("Created %s record %s", kind.value, record_id)
        return record_id

    async def update(self, kind: RecordKind, record_id: int, patch: Mapping[str, Any]) -> None:
        await asyncio.sleep(0)
        table = self._tables[kind]
        current = table.get(int(record_id))
        if current is None:
            raise RecordNotFoundError(kind, record_id)

        fields = {f.name for f in dataclasses.fields(current)}
        unknown = sorted(set(patch) - fields)
        if unknown or "id" in patch:
            raise ValidationError(f"Cannot patch fields {unknown or ['id']} on {kind.value}")

        table[int(record_id)] = dataclasses.replace(current, **dict(patch))

    async def delete_by_id(self, kind: RecordKind, record_id: int) -> None:
        await asyncio.sleep(0)
        if self._tables[kind].pop(int(record_id), None) is None:
            raise RecordNotFoundError(kind, record_id)
        logger.debug("Deleted %s record %s", kind.value, record_id)
