from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Practice:
    id: int
    name: str


@dataclass(frozen=True)
class PracticeDraft:
    name: str

    def to_record(self, record_id: int) -> Practice:
        return Practice(id=int(record_id), name=self.name)
