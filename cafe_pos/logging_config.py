"""
Logging setup for Cafe POS.

Every module logs through ``logging.getLogger(__name__)``, so the whole
package hangs off the "cafe_pos" logger. setup_logging() sets that logger's
level and sends records to stdout, where the till's process supervisor
collects them.

The receipt generator talks to OpenAI through httpx and instructor. Those
libraries log every request at INFO, which would drown out order activity,
so they are held at WARNING unless LOG_LEVEL is DEBUG.

Usage:
    from cafe_pos.logging_config import setup_logging
    setup_logging()           # LOG_LEVEL from the environment
    setup_logging("DEBUG")    # explicit override
"""
import logging
import os
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

PACKAGE_LOGGER = "cafe_pos"

# Chatty at INFO; only useful when debugging the receipt generator or SQL
NOISY_LOGGERS = ("httpx", "httpcore", "openai", "instructor", "sqlalchemy.engine")


def _resolve_level(level: Optional[str]) -> int:
    """Map a level name to its number. Unknown names fall back to INFO."""
    name = (level or os.getenv("LOG_LEVEL") or "INFO").strip().upper()
    if name not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        name = "INFO"
    return getattr(logging, name)


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure logging for the application.

    Args:
        level: DEBUG, INFO, WARNING, ERROR, or CRITICAL (any case).
               Defaults to the LOG_LEVEL environment variable, then INFO.
    """
    numeric_level = _resolve_level(level)

    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        stream=sys.stdout,
    )
    logging.getLogger(PACKAGE_LOGGER).setLevel(numeric_level)

    noisy_level = logging.DEBUG if numeric_level == logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(noisy_level)

    logging.getLogger(__name__).debug("Logging configured at %s", logging.getLevelName(numeric_level))
