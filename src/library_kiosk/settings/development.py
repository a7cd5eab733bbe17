import os

from ._common import *  # noqa: F401,F403

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DEBUG = True
SESSION_COOKIE_SECURE = False

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
