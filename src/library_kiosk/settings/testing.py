from ._common import *  # noqa: F401,F403

SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True
SESSION_COOKIE_SECURE = False

STORE_BACKEND = "sheets"
LIBRARY_TIMEZONE = "Asia/Bangkok"

ADMIN_PASSWORD = "test-admin"
ADMIN_PASSWORD_HASH = ""
ADMIN_SESSION_TOKEN = "test-session"
