"""
Runtime configuration.

Values resolve in order: built-in defaults, environment, explicit arguments
(normally CLI flags).
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

DEFAULT_HOME = Path("~/.local/share/jotter").expanduser()
DATA_FILE_NAME = "jotter.json"
LOG_FILE_NAME = "jotter.log"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_PAGE_LIMIT = 50


@dataclass(frozen=True)
class Config:
    """Resolved runtime configuration."""

    home: Path
    data_file: Path
    log_level: str
    log_file: Path
    page_limit: int = DEFAULT_PAGE_LIMIT


def load_config(
    data_file: Path | None = None,
    log_level: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> Config:
    """Build a Config from defaults, the environment and explicit overrides."""
    env = os.environ if environ is None else environ

    home = Path(env.get("JOTTER_HOME", DEFAULT_HOME)).expanduser()

    if data_file is None:
        data_file = Path(env.get("JOTTER_DATA_FILE", home / DATA_FILE_NAME))

    if log_level is None:
        log_level = env.get("JOTTER_LOG_LEVEL", DEFAULT_LOG_LEVEL)

    log_file = Path(env.get("JOTTER_LOG_FILE", home / LOG_FILE_NAME))

    try:
        page_limit = int(env.get("JOTTER_PAGE_LIMIT", DEFAULT_PAGE_LIMIT))
    except ValueError:
        page_limit = DEFAULT_PAGE_LIMIT

    return Config(
        home=home,
        data_file=Path(data_file).expanduser(),
        log_level=log_level.upper(),
        log_file=log_file.expanduser(),
        page_limit=page_limit,
    )
