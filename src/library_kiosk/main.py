from __future__ import annotations

import importlib
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .access.controller import register as register_access
from .attendance.controller import register as register_attendance
from .common.logging_utils import configure_logging, get_logger
from .container import Container, build_container
from .settings import get_settings_module
from .store.controller import register as register_health
from .students.controller import register as register_students

logger = get_logger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", None))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["SESSION_COOKIE_SECURE"] = bool(getattr(settings, "SESSION_COOKIE_SECURE", False))
    app.json.ensure_ascii = False

    container = container or build_container(settings)
    app.extensions["library_kiosk"] = container

    logger.info(
        "Library kiosk starting (settings=%s, backend=%s, timezone=%s)",
        settings_module,
        container.store.backend.value,
        getattr(settings, "LIBRARY_TIMEZONE", None),
    )

    register_attendance(app, container)
    register_students(app, container)
    register_access(app, container)
    register_health(app, container)

    return app
