from __future__ import annotations

from flask import Flask, jsonify

from ..common.logging_utils import get_logger
from ..core import messages
from ..core.enums import StoreBackend
from ..core.exceptions import DomainError
from ..container import Container

logger = get_logger(__name__)


def register(app: Flask, container: Container) -> None:
    store = container.store

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        try:
            store.ping()
        except DomainError as e:
            logger.warning("Health check failed for %s backend: %s", store.backend.value, e)
            fallback = messages.SHEETS_UNAVAILABLE if store.backend is StoreBackend.SHEETS else messages.DATABASE_UNAVAILABLE
            return jsonify({"status": "error", "message": str(e) or fallback}), 500
        except Exception as e:
            logger.exception("Health check crashed for %s backend", store.backend.value)
            return jsonify({"status": "error", "message": str(e) or messages.SYSTEM_ERROR}), 500
        return jsonify({"status": "ok", "backend": store.backend.value})
