from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import build_container
from .database.bootstrap import apply_schema, ensure_demo_data, list_tables
from .incidents.controller import register as register_incidents
from .monitor.controller import register as register_monitor
from .payroll.controller import register as register_payroll
from .settings.controller import register as register_settings
from .users.controller import register as register_users
from .venues.controller import register as register_venues

_logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[3]


def _configure_logging(level_name: str) -> None:
    level = getattr(logging, str(level_name).upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    logging.getLogger().setLevel(level)


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    _configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["MAX_CONTENT_LENGTH"] = 16 * 1024 * 1024

    _logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=PROJECT_ROOT / "database" / "schema.sql")
        _logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        ensure_demo_data(db_config)

    upload_dir = str(Path(getattr(settings, "UPLOAD_DIR", PROJECT_ROOT / "uploads")).resolve())
    upload_url_prefix = getattr(settings, "UPLOAD_URL_PREFIX", "/uploads")

    api_key = getattr(settings, "GEMINI_API_KEY", None)
    if not api_key:
        _logger.warning("GEMINI_API_KEY is not set; photo validation will report a configuration error")

    container = build_container(
        db_config=db_config,
        upload_dir=upload_dir,
        upload_url_prefix=upload_url_prefix,
        gemini_api_key=api_key,
        gemini_model=getattr(settings, "GEMINI_MODEL", "gemini-2.5-flash"),
        ai_timeout_seconds=float(getattr(settings, "AI_TIMEOUT_SECONDS", 30)),
    )

    register_users(app, container)
    register_attendance(app, container)
    register_venues(app, container)
    register_monitor(app, container)
    register_incidents(app, container)
    register_payroll(app, container)
    register_settings(app, container, upload_dir=upload_dir, upload_url_prefix=upload_url_prefix)

    return app
