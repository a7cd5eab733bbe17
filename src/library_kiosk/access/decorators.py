from __future__ import annotations

from functools import wraps

from flask import request

from ..common.http import error_response
from ..core import messages
from ..core.constants import ADMIN_SESSION_COOKIE
from .service import AdminAccessService


def admin_required(access: AdminAccessService):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if not access.is_authenticated(request.cookies.get(ADMIN_SESSION_COOKIE)):
                return error_response(messages.ADMIN_REQUIRED, 401)
            return view(*args, **kwargs)

        return wrapper

    return decorator
