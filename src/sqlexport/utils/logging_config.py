"""Logging configuration."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(log_level: str | None = "INFO") -> None:
    """
    Configure root logging.

    Log records go to stderr because stdout may carry the generated SQL.

    Args:
        log_level: Level name (case insensitive). Unknown names fall back
            to INFO. None keeps only warnings and errors.
    """
    if log_level is None:
        level = logging.WARNING
    else:
        level = getattr(logging, log_level.upper(), None)
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root.addHandler(handler)
    root.setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(name)
