from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.hr_intranet.hr_intranet.database.bootstrap import apply_schema, list_tables
from src.hr_intranet.hr_intranet.database.connection import DBConfig
from src.hr_intranet.hr_intranet.main import configure_logging


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
    tables = list_tables(db_config)
    print(f"OK: schema.sql -> {DBConfig.from_dict(db_config).describe()} ({', '.join(sorted(tables))})")


if __name__ == "__main__":
    main()
