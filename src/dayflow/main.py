from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, request

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .auth.controller import register as register_auth
from .common.http import ok, register_error_handlers
from .container import Container, build_container
from .core.constants import API_PREFIX
from .dashboard.controller import register as register_dashboard
from .database.bootstrap import apply_schema, ensure_hr_account, list_tables
from .employees.controller import register as register_employees
from .leaves.controller import register as register_leaves
from .notifications.controller import register as register_notifications
from .payroll.controller import register as register_payroll

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def require_secrets(settings) -> None:
    missing = [name for name in getattr(settings, "REQUIRED_SECRETS", ()) if not getattr(settings, name, None)]
    if missing:
        raise RuntimeError(f"Missing required settings: {', '.join(missing)}")


def _prepare_database(settings, db_config: dict) -> None:
    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=SCHEMA_PATH)
        logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        created = ensure_hr_account(
            db_config,
            employee_id=getattr(settings, "SEED_HR_EMPLOYEE_ID"),
            email=getattr(settings, "SEED_HR_EMAIL"),
            password=getattr(settings, "SEED_HR_PASSWORD"),
        )
        if created:
            logger.info("Seeded HR account %s", getattr(settings, "SEED_HR_EMAIL"))


def create_app(container: Optional[Container] = None) -> Flask:
    """Application factory.

    Without ``container`` the settings module picked by APP_ENV is loaded and
    MySQL repositories are wired; tests pass a ready container instead.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    require_secrets(settings)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["API_PREFIX"] = getattr(settings, "API_PREFIX", API_PREFIX)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

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
        _prepare_database(settings, db_config)
        container = build_container(settings)

    app.extensions["dayflow"] = container
    register_error_handlers(app)

    @app.after_request
    def log_request(response):
        logger.info("%s %s %s", request.method, request.path, response.status_code)
        return response

    @app.route(f"{app.config['API_PREFIX']}/health", methods=["GET"], endpoint="health")
    def health():
        return ok({"status": "ok", "time": container.clock.now().isoformat()}, "Server is running")

    register_auth(app, container)
    register_employees(app, container)
    register_attendance(app, container)
    register_leaves(app, container)
    register_payroll(app, container)
    register_notifications(app, container)
    register_dashboard(app, container)

    return app
