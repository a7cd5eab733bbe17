from __future__ import annotations

import importlib

from dotenv import load_dotenv

from library_kiosk.common.logging_utils import configure_logging, get_logger
from library_kiosk.database.connection import DatabaseConnection, DBConfig
from library_kiosk.settings import get_settings_module

logger = get_logger("library_kiosk.scripts.init_db")


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", None))

    config = DBConfig.from_dict(dict(settings.DB_CONFIG))
    DatabaseConnection(config).ensure_schema()
    logger.info(
        "Schema ready on %s@%s:%s/%s",
        config.user,
        config.host,
        config.port,
        config.database,
    )


if __name__ == "__main__":
    main()
