from __future__ import annotations

import importlib
import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import build_container
from .database.bootstrap import apply_schema, list_tables
from .jobs.scheduler import build_scheduler
from .schedules.controller import register as register_schedules
from .staff.controller import register as register_staff

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def configure_logging(settings) -> None:
    level = getattr(settings, "LOG_LEVEL", "DEBUG" if getattr(settings, "DEBUG", False) else "INFO")
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(settings)

    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))

    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=SCHEMA_PATH)
        logger.info("Schema ready (tables=%s)", len(list_tables(db_config)))

    container = build_container(db_config=db_config, settings=settings)
    app.extensions["office_attendance"] = container

    register_attendance(app, container)
    register_staff(app, container)
    register_schedules(app, container)

    # The reloader imports the app twice; only the serving process runs jobs.
    reloader_parent = app.config["DEBUG"] and os.environ.get("WERKZEUG_RUN_MAIN") != "true"
    if bool(getattr(settings, "ENABLE_SCHEDULER", False)) and not reloader_parent:
        scheduler = build_scheduler(container)
        scheduler.start()
        app.extensions["office_attendance_scheduler"] = scheduler
        logger.info("Background scheduler started (%s jobs)", len(scheduler.get_jobs()))

    return app
