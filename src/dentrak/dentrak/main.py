from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv

from config import get_settings_module

from .container import Container, build_container
from .core.constants import DEMO_PRACTICE_NAMES
from .database.bootstrap import apply_schema, ensure_practices, list_tables

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_container() -> Container:
    load_dotenv(override=False)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    store_backend = getattr(settings, "STORE_BACKEND", "memory")
    db_config = dict(getattr(settings, "DB_CONFIG"))
    seed_demo_data = bool(getattr(settings, "SEED_DEMO_DATA", False))

    logger.info(
        "settings=%s store=%s db=%s@%s:%s/%s",
        settings_module,
        store_backend,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if store_backend == "mysql" and bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=SCHEMA_PATH)
        if seed_demo_data:
            ensure_practices(db_config, DEMO_PRACTICE_NAMES)
        logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))

    return build_container(store_backend=store_backend, db_config=db_config, seed_demo_data=seed_demo_data)
