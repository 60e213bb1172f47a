from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from .core.constants import DEMO_PRACTICE_NAMES
from .core.enums import RecordKind
from .core.exceptions import ValidationError
from .database.connection import DatabaseConnection, DBConfig
from .practices.model import PracticeDraft
from .store.memory_store import InMemoryRecordStore
from .store.mysql_store import MySQLRecordStore
from .store.repository import RecordStore
from .tracker.service import TrackerService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Container:
    store: RecordStore
    store_backend: str

    def new_tracker(self) -> TrackerService:
        """Fresh editing session with an empty pending change set."""
        return TrackerService(self.store)

    async def open_tracker(self) -> TrackerService:
        tracker = self.new_tracker()
        await tracker.load()
        return tracker


def build_store(*, store_backend: str, db_config: Mapping[str, Any], seed_demo_data: bool = False) -> RecordStore:
    backend = (store_backend or "memory").lower()

    if backend == "memory":
        store = InMemoryRecordStore()
        if seed_demo_data:
            store.seed(RecordKind.PRACTICES, [PracticeDraft(name) for name in DEMO_PRACTICE_NAMES])
        return store

    if backend == "mysql":
        conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))
        return MySQLRecordStore(conn)

    raise ValidationError(f"Unknown store backend: {store_backend!r}")


def build_container(*, store_backend: str, db_config: Mapping[str, Any], seed_demo_data: bool = False) -> Container:
    store = build_store(store_backend=store_backend, db_config=db_config, seed_demo_data=seed_demo_data)
    logger.debug("Using %s record store", store_backend)
    return Container(store=store, store_backend=store_backend)
