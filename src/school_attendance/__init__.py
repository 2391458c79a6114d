"""School Attendance package.

Feature modules (teachers, attendance, holidays, analytics, reports, ...) each
carry a model, a repository protocol with its MySQL implementation, a service
and a thin JSON controller. The attendance-rate engine lives in
``analytics.engine`` and is pure.
"""
from __future__ import annotations

import importlib
import logging
from datetime import timedelta

from dotenv import load_dotenv
from flask import Flask

from .config import get_settings_module
from .core.constants import DEFAULT_SESSION_DAYS
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_users, list_tables

from .common.web import register_error_handlers
from .container import build_container
from .alerts.controller import register as register_alerts
from .analytics.controller import register as register_analytics
from .attendance.controller import register as register_attendance
from .backup.controller import register as register_backup
from .departments.controller import register as register_departments
from .holidays.controller import register as register_holidays
from .reports.controller import register as register_reports
from .teachers.controller import register as register_teachers
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def create_app(container=None) -> Flask:
    """Build the Flask app; pass `container` to run on other repositories (tests)."""

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)

    level = getattr(settings, "LOG_LEVEL", "DEBUG" if app.config["DEBUG"] else "INFO")
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if container is None:
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            logger.info("schema ready (tables=%s)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config)
            ensure_demo_users(db_config)
            logger.info("demo seed ready")
        container = build_container(db_config=db_config, settings=settings)

    register_error_handlers(app)
    register_users(app, container)
    register_teachers(app, container)
    register_departments(app, container)
    register_attendance(app, container)
    register_holidays(app, container)
    register_analytics(app, container)
    register_alerts(app, container)
    register_reports(app, container)
    register_backup(app, container)

    return app
