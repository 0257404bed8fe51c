"""Structured logging for the price index.

Every module gets its logger from `setup_logger(__name__)`. Fields passed
through `extra=` are appended to the line as key=value pairs, e.g.

    2026-10-19 12:00:00 | price_index.engine.adapter | INFO | adapter.py:80 | Indexed 3 stores | query=lip balm
"""

import logging
import sys
from typing import Any

from src.price_index.config import settings

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(filename)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Attributes every LogRecord carries; anything else came in through `extra=`.
_STANDARD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {
    "message",
    "asctime",
}


class StructuredFormatter(logging.Formatter):
    """Formatter that appends `extra=` fields as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        base_msg = super().format(record)
        extras = " ".join(
            f"{key}={value}"
            for key, value in record.__dict__.items()
            if key not in _STANDARD_ATTRS
        )
        return f"{base_msg} | {extras}" if extras else base_msg


def setup_logger(name: str, level: str | None = None) -> logging.Logger:
    """Return a stdout logger for `name` at `level` (default: settings.log_level).

    Calling it again for the same name only updates the level.
    """
    logger = logging.getLogger(name)
    log_level = getattr(logging, (level or settings.log_level).upper())
    logger.setLevel(log_level)

    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(StructuredFormatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False

    return logger


def log_with_context(logger: logging.Logger, level: str, message: str, **context: Any) -> None:
    """Log `message` at `level` with `context` as structured fields."""
    getattr(logger, level.lower())(message, extra=context)
