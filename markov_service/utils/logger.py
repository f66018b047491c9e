"""
Logging setup shared by the service entry points.
"""

import logging
import sys
from typing import Optional

from markov_service.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"


def setup_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Configure the root handler once and return a named logger.

    Args:
        name: Logger name, usually ``__name__``
        level: Level name; defaults to settings.LOG_LEVEL
    """
    root = logging.getLogger()
    level_name = (level or settings.LOG_LEVEL).upper()

    if not any(getattr(h, "_markov_service", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._markov_service = True  # type: ignore[attr-defined]
        root.addHandler(handler)

    root.setLevel(level_name)
    return logging.getLogger(name)
