from __future__ import annotations

import argparse
import importlib

from dotenv import load_dotenv

from library_kiosk.common.logging_utils import configure_logging, get_logger
from library_kiosk.container import build_container
from library_kiosk.kiosk.card_reader import CardScanner
from library_kiosk.kiosk.checkin import CardCheckIn, read_chunks
from library_kiosk.settings import get_settings_module

logger = get_logger("library_kiosk.scripts.card_checkin")


def main() -> None:
    parser = argparse.ArgumentParser(description="Check students in from an RFID reader device.")
    parser.add_argument("device", help="reader device or file, e.g. /dev/ttyUSB0")
    parser.add_argument("--purpose", action="append", required=True, help="visit purpose (repeatable)")
    args = parser.parse_args()

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", None))

    container = build_container(settings)
    checkin = CardCheckIn(container.attendance_service, CardScanner(), args.purpose)

    logger.info("Reading card scans from %s", args.device)
    with open(args.device, "rb", buffering=0) as stream:
        recorded = checkin.process(read_chunks(stream))
    logger.info("Reader closed after %d check-ins", len(recorded))


if __name__ == "__main__":
    main()
