"""Environment-driven runtime settings."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path


logger = logging.getLogger("uvicorn.error")

_DB_PATH_ENV = "DEPTHCHART_DB_PATH"
_POSITIONS_FILE_ENV = "DEPTHCHART_POSITIONS_FILE"
_LOG_LEVEL_ENV = "DEPTHCHART_LOG_LEVEL"

_DB_PATH_DEFAULT = "depthchart.sqlite"
_LOG_LEVEL_DEFAULT = "INFO"
_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


@dataclass(frozen=True)
class Settings:
    db_path: Path | str = Path(_DB_PATH_DEFAULT)
    positions_file: Path | None = None
    log_level: str = _LOG_LEVEL_DEFAULT


def _env_db_path() -> Path | str:
    raw = os.getenv(_DB_PATH_ENV)
    if not raw:
        return Path(_DB_PATH_DEFAULT)
    if raw.startswith("file:"):
        return raw
    return Path(raw)


def _env_positions_file() -> Path | None:
    raw = os.getenv(_POSITIONS_FILE_ENV)
    if not raw:
        return None
    return Path(raw)


def _env_log_level() -> str:
    raw = os.getenv(_LOG_LEVEL_ENV)
    if raw is None:
        return _LOG_LEVEL_DEFAULT
    value = raw.strip().upper()
    if value not in _LOG_LEVELS:
        logger.warning("Invalid log level for %s: %s; using default %s", _LOG_LEVEL_ENV, raw, _LOG_LEVEL_DEFAULT)
        return _LOG_LEVEL_DEFAULT
    return value


def load_settings() -> Settings:
    return Settings(
        db_path=_env_db_path(),
        positions_file=_env_positions_file(),
        log_level=_env_log_level(),
    )
