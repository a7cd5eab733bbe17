"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_TIMEZONE = "Asia/Bangkok"

DEFAULT_STUDENT_PAGE_SIZE = 50
MAX_STUDENT_PAGE_SIZE = 500
STUDENT_UPSERT_CHUNK_SIZE = 100

DEFAULT_POOL_SIZE = 10

ADMIN_SESSION_COOKIE = "acr_admin_session"
DEFAULT_ADMIN_SESSION_TOKEN = "acr_session"
ADMIN_SESSION_MAX_AGE = 60 * 60 * 8

CARD_SCAN_COOLDOWN_SECONDS = 2.0
