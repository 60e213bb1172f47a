from __future__ import annotations

from typing import Any, Mapping, Protocol, Sequence

from ..core.enums import RecordKind


class RecordStore(Protocol):
    """Asynchronous, id-addressed record store used by the staging editors."""

    async def list_all(self, kind: RecordKind) -> Sequence[Any]:
        """Return every persisted record of a kind, ordered by id."""

        raise NotImplementedError

    async def create(self, kind: RecordKind, draft: Any) -> int:
        """Persist a draft and return the new record id."""

        raise NotImplementedError

    async def update(self, kind: RecordKind, record_id: int, patch: Mapping[str, Any]) -> None:
        """Apply a partial patch. Raises RecordNotFoundError for unknown ids."""

        raise NotImplementedError

    async def delete_by_id(self, kind: RecordKind, record_id: int) -> None:
        """Remove a record. Raises RecordNotFoundError for unknown ids."""

        raise NotImplementedError
