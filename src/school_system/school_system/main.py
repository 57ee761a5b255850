from __future__ import annotations

import importlib
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .common.errors import register_error_handlers
from .container import Container, build_container
from .database.bootstrap import apply_schema, ensure_demo_admin, list_tables

from .attendance.controller import register as register_attendance
from .classrooms.controller import register as register_classrooms
from .groups.controller import register as register_groups
from .notifications.controller import register as register_notifications
from .payments.controller import register as register_payments
from .schedules.controller import register as register_schedules
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _register_status_routes(app: Flask) -> None:
    @app.route("/hello", methods=["GET"], endpoint="hello")
    def hello():
        return jsonify({"message": "Hello from Prof-it API!"})

    @app.route("/status", methods=["GET"], endpoint="status")
    def status():
        return jsonify(
            {
                "status": "ok",
                "timestamp": datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
                "app": "Prof-it Backend",
            }
        )


def create_app(container: Optional[Container] = None, settings_module: Optional[str] = None) -> Flask:
    """Build the Flask app.

    Pass a pre-wired ``container`` (e.g. in-memory repositories) to skip all
    database setup; otherwise one is built from the selected settings module.
    """

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    _configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
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
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_demo_admin(db_config)
            logger.info("demo admin ready")

        container = build_container(
            db_config=db_config,
            auth_config={
                "secret_key": getattr(settings, "SECRET_KEY"),
                "admin_registration_key": getattr(settings, "ADMIN_REGISTRATION_KEY", None),
            },
            mail_config=dict(getattr(settings, "MAIL_CONFIG", {}) or {}),
            reset_url=getattr(settings, "RESET_PASSWORD_URL", ""),
        )

    register_error_handlers(app)
    _register_status_routes(app)

    register_users(app, container)
    register_classrooms(app, container)
    register_groups(app, container)
    register_schedules(app, container)
    register_attendance(app, container)
    register_payments(app, container)
    register_notifications(app, container)

    return app
