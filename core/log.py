"""Logger setup shared by the services and the timeline API."""
from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

from core.settings import LOGGING

ROOT_LOGGER_NAME = "planner"


def get_logger(name: str = "timeline") -> logging.Logger:
    """Return ``planner.<name>``; the rotating file handler is attached once on ``planner``."""

    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not root.handlers:
        LOGGING.path.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            LOGGING.path,
            maxBytes=LOGGING.max_bytes,
            backupCount=LOGGING.backup_count,
            encoding="utf-8",
        )
        handler.setFormatter(logging.Formatter(LOGGING.fmt))
        root.addHandler(handler)
        root.setLevel(LOGGING.level)
    return root.getChild(name)


__all__ = ["get_logger", "ROOT_LOGGER_NAME"]
