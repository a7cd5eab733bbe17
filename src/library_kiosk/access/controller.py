from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import json_body, json_errors
from ..common.logging_utils import get_logger
from ..core.constants import ADMIN_SESSION_COOKIE, ADMIN_SESSION_MAX_AGE
from ..container import Container

logger = get_logger(__name__)


def register(app: Flask, container: Container) -> None:
    access = container.admin_access

    @app.route("/admin/login", methods=["POST"], endpoint="admin_login")
    @json_errors
    def admin_login():
        password = str(json_body().get("password") or "")
        token = access.login(password)

        response = jsonify({"success": True})
        response.set_cookie(
            ADMIN_SESSION_COOKIE,
            token,
            max_age=ADMIN_SESSION_MAX_AGE,
            path="/",
            httponly=True,
            samesite="Lax",
            secure=bool(app.config.get("SESSION_COOKIE_SECURE", False)),
        )
        logger.info("Admin logged in from %s", request.remote_addr)
        return response

    @app.route("/admin/session", methods=["GET"], endpoint="admin_session")
    def admin_session():
        authenticated = access.is_authenticated(request.cookies.get(ADMIN_SESSION_COOKIE))
        return jsonify({"authenticated": authenticated})

    @app.route("/admin/logout", methods=["POST"], endpoint="admin_logout")
    def admin_logout():
        response = jsonify({"success": True})
        response.set_cookie(ADMIN_SESSION_COOKIE, "", max_age=0, path="/", httponly=True)
        return response
