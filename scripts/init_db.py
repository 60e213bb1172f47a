from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for path in (REPO_ROOT, REPO_ROOT / "src" / "dentrak"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from config import get_settings_module

from dentrak.core.constants import DEMO_PRACTICE_NAMES
from dentrak.database.bootstrap import apply_schema, ensure_practices, list_tables


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    schema_path = REPO_ROOT / "database" / "schema.sql"
    apply_schema(db_config, schema_path=schema_path)
    if "--seed" in sys.argv[1:]:
        ensure_practices(db_config, DEMO_PRACTICE_NAMES)

    tables = list_tables(db_config)
    print(
        "OK: Applied schema.sql -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')} "
        f"(tables={len(tables)})"
    )


if __name__ == "__main__":
    main()
