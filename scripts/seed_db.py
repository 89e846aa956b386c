"""Nạp dữ liệu demo: phòng ban và các tài khoản admin/admin123, nhân viên */staff123."""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.hr_intranet.hr_intranet.database.bootstrap import apply_seed_sql, ensure_demo_employees
from src.hr_intranet.hr_intranet.database.connection import DBConfig
from src.hr_intranet.hr_intranet.main import configure_logging


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    db_config = dict(settings.DB_CONFIG)

    apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
    ensure_demo_employees(db_config)
    print(f"OK: demo data -> {DBConfig.from_dict(db_config).describe()}")


if __name__ == "__main__":
    main()
