# chatrooms/core/logging.py

import logging
import sys
from typing import Optional

from chatrooms.core.config import settings


LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# Third-party loggers and the level they are capped at
_QUIET_LOGGERS = {
    "uvicorn": logging.INFO,
    "uvicorn.error": logging.INFO,
    "uvicorn.access": logging.WARNING,
    "websockets": logging.WARNING,
}


def resolve_level(level_name: Optional[str]) -> int:
    """Map a level name such as "debug" to its numeric value; unknown names mean INFO."""
    level = logging.getLevelName((level_name or "").upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(level_name: Optional[str] = None) -> int:
    """
    Configure logging for the chat server.

    - Level comes from ``level_name`` or LOG_LEVEL (default INFO)
    - One stdout handler on the root logger; if a server such as Uvicorn
      already installed handlers, only the level is changed
    - Room chatter from uvicorn / websockets is capped

    Returns:
        The numeric level applied to the root logger
    """
    level = resolve_level(level_name or settings.LOG_LEVEL)
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    if not root_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root_logger.addHandler(handler)

    for name, cap in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(max(level, cap))

    return level


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Logger for a chatrooms module.

    Usage:
        logger = get_logger(__name__)
        logger.info("→ %s joined %s", username, room_id)
    """
    return logging.getLogger(name)
