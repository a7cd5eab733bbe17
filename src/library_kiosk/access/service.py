from __future__ import annotations

import hmac
from typing import Optional

from werkzeug.security import check_password_hash

from ..common.validators import require_non_empty
from ..core import messages
from ..core.constants import DEFAULT_ADMIN_SESSION_TOKEN
from ..core.exceptions import AuthenticationError, ConfigurationError


class AdminAccessService:
    """Use case: admin login against a configured secret.

    The session cookie carries a fixed opaque token; there is no per-user
    session store.
    """

    def __init__(
        self,
        *,
        password: str = "",
        password_hash: str = "",
        session_token: str = DEFAULT_ADMIN_SESSION_TOKEN,
    ):
        self._password = password or ""
        self._password_hash = password_hash or ""
        self._session_token = session_token or DEFAULT_ADMIN_SESSION_TOKEN

    @property
    def configured(self) -> bool:
        return bool(self._password or self._password_hash)

    @property
    def session_token(self) -> str:
        return self._session_token

    def login(self, password: Optional[str]) -> str:
        """Check the password and return the session token to set."""

        if not self.configured:
            raise ConfigurationError(messages.ADMIN_PASSWORD_NOT_CONFIGURED)
        password = require_non_empty(password, messages.ADMIN_PASSWORD_REQUIRED)

        if self._password_hash:
            try:
                ok = check_password_hash(self._password_hash, password)
            except ValueError:
                # e.g. a malformed hash in the environment
                ok = False
        else:
            ok = hmac.compare_digest(password.encode("utf-8"), self._password.encode("utf-8"))

        if not ok:
            raise AuthenticationError(messages.ADMIN_PASSWORD_INVALID)
        return self._session_token

    def is_authenticated(self, cookie_value: Optional[str]) -> bool:
        if not cookie_value:
            return False
        return hmac.compare_digest(cookie_value.encode("utf-8"), self._session_token.encode("utf-8"))
