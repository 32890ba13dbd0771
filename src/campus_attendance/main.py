from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .attendance.controller import register as register_attendance
from .config import get_settings_module
from .container import Container, build_container
from .core.constants import DEFAULT_CAMPUS_TIMEZONE, DEFAULT_STATE_REFRESH_SECONDS
from .database.bootstrap import apply_schema, ensure_demo_accounts, list_tables
from .database.connection import DBConfig
from .enrollments.controller import register as register_enrollments
from .lectures.controller import register as register_lectures
from .logging_config import configure_logging
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    """Application factory.

    Pass a prebuilt container to run against other repositories (tests do);
    otherwise the MySQL-backed one is built from the settings module.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["STATE_REFRESH_SECONDS"] = int(
        getattr(settings, "STATE_REFRESH_SECONDS", DEFAULT_STATE_REFRESH_SECONDS)
    )
    campus_timezone = getattr(settings, "CAMPUS_TIMEZONE", DEFAULT_CAMPUS_TIMEZONE)
    app.config["CAMPUS_TIMEZONE"] = campus_timezone

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info("settings=%s db=%s tz=%s", settings_module, DBConfig.from_dict(db_config).describe(), campus_timezone)

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_demo_accounts(db_config)

        container = build_container(db_config=db_config, campus_timezone=campus_timezone)

    app.extensions["campus_attendance"] = container

    register_users(app, container)
    register_lectures(app, container)
    register_enrollments(app, container)
    register_attendance(app, container)

    return app
