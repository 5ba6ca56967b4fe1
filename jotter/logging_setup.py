"""Logging bootstrap.

The interactive browser owns the terminal, so records go to a rotating file
rather than stderr. Modules log through ``logging.getLogger(__name__)`` and
propagate to the ``jotter`` logger configured here.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOGGER_NAME = "jotter"

_CONFIGURED_PATH: Path | None = None


def _parse_level(raw: str | None) -> int:
    normalized = str(raw or "INFO").strip().upper()
    level = getattr(logging, normalized, logging.INFO)
    return level if isinstance(level, int) else logging.INFO


def _make_file_handler(level: int, file_path: Path) -> logging.Handler:
    handler = RotatingFileHandler(
        file_path,
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s [%(threadName)s] %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )
    return handler


def configure(level: str | None, file_path: Path) -> logging.Logger:
    """Attach the file handler to the jotter logger.

    Idempotent: a second call for the same file only updates the level.
    """
    global _CONFIGURED_PATH

    numeric = _parse_level(level)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric)
    logger.propagate = False

    if _CONFIGURED_PATH == file_path:
        for handler in logger.handlers:
            handler.setLevel(numeric)
        return logger

    file_path.parent.mkdir(parents=True, exist_ok=True)
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.addHandler(_make_file_handler(numeric, file_path))
    logging.captureWarnings(True)

    _CONFIGURED_PATH = file_path
    return logger
