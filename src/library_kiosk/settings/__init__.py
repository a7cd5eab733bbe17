import os


def get_settings_module() -> str:
    # APP_ENV chooses the settings module, default 'development'
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "library_kiosk.settings.production"

    if env in {"test", "testing"}:
        return "library_kiosk.settings.testing"

    return "library_kiosk.settings.development"
