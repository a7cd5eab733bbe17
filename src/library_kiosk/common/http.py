from __future__ import annotations

from functools import wraps

from flask import jsonify, request

from ..core import messages
from ..core.exceptions import (
    AuthenticationError,
    BackendError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from .logging_utils import get_logger

logger = get_logger(__name__)


def error_response(message: str, status: int):
    return jsonify({"error": message}), status


def status_for(exc: DomainError) -> int:
    if isinstance(exc, ValidationError):
        return 400
    if isinstance(exc, AuthenticationError):
        return 401
    if isinstance(exc, NotFoundError):
        return 404
    return 500


def json_errors(view):
    """Map domain exceptions to ``{error}`` JSON with a status code.

    Backend failures pass their message through to the caller; anything
    unexpected is logged with its traceback and reported as a system error.
    """

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except BackendError as e:
            logger.exception("Backend failure in %s", view.__name__)
            return error_response(str(e) or messages.SYSTEM_ERROR, 500)
        except DomainError as e:
            return error_response(str(e), status_for(e))
        except Exception as e:
            logger.exception("Unhandled error in %s", view.__name__)
            return error_response(str(e) or messages.SYSTEM_ERROR, 500)

    return wrapper


def json_body() -> dict:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}
