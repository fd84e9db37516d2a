"""Logging setup: console format per environment plus an optional debug file."""

import logging
import os
import sys

JSON_FORMAT = '{"time":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","message":"%(message)s"}'
TEXT_FORMAT = "%(levelname)s %(name)s: %(message)s"
DEBUG_FILE_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"


def configure_logging(is_production: bool, debug_log_path: str | None = None) -> None:
    # Structured logging: JSON for production, human-readable for local
    if is_production:
        logging.basicConfig(level=logging.INFO, format=JSON_FORMAT, stream=sys.stdout)
    else:
        logging.basicConfig(level=logging.INFO, format=TEXT_FORMAT)

    if debug_log_path:
        directory = os.path.dirname(debug_log_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        handler = logging.FileHandler(debug_log_path, encoding="utf-8")
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(logging.Formatter(DEBUG_FILE_FORMAT))
        for name in ("services", "routes"):
            log = logging.getLogger(name)
            log.setLevel(logging.DEBUG)
            log.addHandler(handler)


def clear_debug_log(debug_log_path: str | None) -> bool:
    """Truncate the debug log. Returns False when file logging is disabled."""
    if not debug_log_path:
        return False
    if os.path.exists(debug_log_path):
        with open(debug_log_path, "w", encoding="utf-8"):
            pass
    return True
