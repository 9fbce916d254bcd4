from __future__ import annotations

import atexit
import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.logging_config import configure_logging
from .container import SessionLookup, build_container
from .database.bootstrap import apply_schema

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def create_app(settings_module: Optional[str] = None, *, session_lookup: SessionLookup | None = None) -> Flask:
    """Application factory.

    ``session_lookup`` resolves a session id to a user when the session cache
    misses; it is how the surrounding auth layer plugs in.
    """

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))

    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    store = str(getattr(settings, "STORE_BACKEND", "memory")).lower()
    if store == "mysql" and bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(getattr(settings, "DB_CONFIG"), schema_path=SCHEMA_PATH)

    container = build_container(settings, session_lookup=session_lookup)
    register_attendance(app, container)
    app.extensions["hr_attendance"] = container

    if bool(getattr(settings, "SCHEDULER_ENABLED", False)):
        container.start_background()
        atexit.register(container.shutdown)

    logger.info("hr-attendance started (settings=%s, store=%s)", settings_module, store)
    return app
