"""Logging setup for applications embedding docportal.

Library modules only call `logging.getLogger(__name__)`; handlers are
installed here and only when the application asks for it.
"""

from __future__ import annotations

import logging
import os
import sys

LOGGER_NAME = "docportal"
LOG_LEVEL_ENV = "DOCPORTAL_LOG_LEVEL"

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


def setup_logging(level: int = logging.INFO, name: str = LOGGER_NAME) -> logging.Logger:
    """
    Configure the package logger.

    - DOCPORTAL_LOG_LEVEL overrides `level` on every call.
    - Exactly one stderr StreamHandler is kept; repeated calls only update
      its level and formatter.
    """
    logger = logging.getLogger(name)

    env_level = (os.getenv(LOG_LEVEL_ENV) or "").strip().lower()
    if env_level:
        level = _LEVELS.get(env_level, level)
    logger.setLevel(level)

    handler: logging.StreamHandler | None = None
    for h in list(logger.handlers):
        if isinstance(h, logging.StreamHandler) and getattr(h, "stream", None) is sys.stderr:
            handler = h
            break

    if handler is None:
        handler = logging.StreamHandler(stream=sys.stderr)
        logger.addHandler(handler)

    handler.setFormatter(
        logging.Formatter(
            fmt="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    return logger
