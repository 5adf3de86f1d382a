"""Application-wide logger writing to platformdirs user_log_dir.

All modules log through children of the ``kanban_board`` logger so a single
rotating file collects engine, persistence, auth and command records. The
level defaults to DEBUG and can be lowered with ``KANBAN_LOG_LEVEL``.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path

from platformdirs import user_log_dir

_APP_NAME = "kanban_board"
_LOG_FILE = "kanban.log"
_MAX_BYTES = 5 * 1024 * 1024  # 5 MB
_BACKUP_COUNT = 3
_LEVEL_ENV = "KANBAN_LOG_LEVEL"

_logger: logging.Logger | None = None


def _configured_level() -> int:
    name = os.getenv(_LEVEL_ENV, "DEBUG").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.DEBUG


def _root_logger() -> logging.Logger:
    global _logger
    if _logger is not None:
        return _logger

    log_dir = Path(user_log_dir(_APP_NAME))
    log_dir.mkdir(parents=True, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        log_dir / _LOG_FILE,
        maxBytes=_MAX_BYTES,
        backupCount=_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )

    logger = logging.getLogger(_APP_NAME)
    logger.setLevel(_configured_level())
    if not logger.handlers:
        logger.addHandler(handler)
    logger.propagate = False

    _logger = logger
    return _logger


def get_logger(component: str | None = None) -> logging.Logger:
    """Return the application logger, or its child for *component*.

    The file handler is attached on first call.
    """
    root = _root_logger()
    if component:
        return root.getChild(component)
    return root
