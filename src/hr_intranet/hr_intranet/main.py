from __future__ import annotations

import importlib
import logging
from datetime import timedelta
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .assessments.controller import register as register_assessments
from .container import build_container
from .core.constants import ANNUAL_LEAVE_DAYS, DEFAULT_SESSION_DAYS
from .database.connection import DBConfig
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_employees, list_tables
from .employees.controller import register as register_employees
from .goals.controller import register as register_goals
from .recommendations.controller import register as register_recommendations

logger = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[3]


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__, template_folder=str(REPO_ROOT / "templates"))

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["SESSION_DAYS"] = int(getattr(settings, "SESSION_DAYS", DEFAULT_SESSION_DAYS))
    app.permanent_session_lifetime = timedelta(days=app.config["SESSION_DAYS"])

    logger.info("settings=%s db=%s", settings_module, DBConfig.from_dict(db_config).describe())

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
        logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
        ensure_demo_employees(db_config)
        logger.info("Demo seed ready")

    container = build_container(
        db_config=db_config,
        annual_leave_days=int(getattr(settings, "ANNUAL_LEAVE_DAYS", ANNUAL_LEAVE_DAYS)),
    )

    register_employees(app, container)
    register_goals(app, container)
    register_recommendations(app, container)
    register_assessments(app, container)

    return app
