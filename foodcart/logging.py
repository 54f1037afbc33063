"""
Logging setup for foodcart.

Usage:
    from foodcart.logging import get_logger
    logger = get_logger(__name__)

    logger.info("Cart restored")
    logger.error("Cart save failed", exc_info=True)

Level comes from LOG_LEVEL (default INFO). With FOODCART_ENV=production the
timestamp is dropped, since the host log collector adds its own.
"""

import logging
import os
import sys
from functools import cache

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FORMAT_SIMPLE = "%(levelname)s - %(name)s - %(message)s"

# Characters that could forge extra log lines (CWE-117)
_UNSAFE_CHARS = str.maketrans({"\n": "\\n", "\r": "\\r", "\t": "\\t", "\x00": ""})


def configure_logging() -> None:
    """Attach a stdout handler to the root logger unless one is already set."""
    root = logging.getLogger()
    if root.handlers:
        return

    level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    production = os.environ.get("FOODCART_ENV") == "production"

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT_SIMPLE if production else LOG_FORMAT))

    root.setLevel(level)
    root.addHandler(handler)

    # The Upstash client logs every HTTP round trip at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


configure_logging()


@cache
def get_logger(name: str) -> logging.Logger:
    """Return the named logger (typically ``__name__``)."""
    return logging.getLogger(name)


def sanitize_id_for_logging(id_value: str | None, max_length: int = 8) -> str:
    """
    Make an externally supplied id safe to log.

    Restaurant and item ids come from the remote data service, so control
    characters are escaped and the value is cut to ``max_length``.

    Returns:
        Sanitized id, or "N/A" when empty
    """
    if not id_value:
        return "N/A"
    return str(id_value).translate(_UNSAFE_CHARS)[:max_length]


__all__ = [
    "LOG_FORMAT",
    "LOG_FORMAT_SIMPLE",
    "configure_logging",
    "get_logger",
    "sanitize_id_for_logging",
]
