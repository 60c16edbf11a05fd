"""Loguru logging setup shared by the API process and the CLI.

Plain text goes to stderr. Records bound with ``json_output=True`` are
emitted serialized instead, so log shippers can pick them out. Setting
``log_dir`` adds a rotating file.
"""

import sys
from pathlib import Path
from typing import Any

from loguru import logger

_LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | {name}:{function}:{line} | {message}"

LOG_FILE_NAME = "geotarget-api.log"


def _wants_json(record: dict[str, Any]) -> bool:
    return bool(record["extra"].get("json_output", False))


def _wants_text(record: dict[str, Any]) -> bool:
    return not _wants_json(record)


def add_file_sink(log_dir: str | Path, level: str) -> Path:
    """Write logs under ``log_dir``, rotated daily and kept for a week.

    Returns:
        Path of the active log file.
    """
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)
    log_file = log_path / LOG_FILE_NAME
    logger.add(log_file, level=level, format=_LOG_FORMAT, rotation="24h", retention="7 days")
    return log_file


def setup_logging(log_level: str = "INFO", log_dir: str | None = None) -> None:
    """Replace all Loguru sinks with the application's.

    Args:
        log_level: Minimum level, case-insensitive.
        log_dir: Optional directory for a rotating log file.
    """
    level = log_level.upper()
    logger.remove()
    logger.add(sys.stderr, level=level, format=_LOG_FORMAT, filter=_wants_text)
    logger.add(sys.stderr, level=level, serialize=True, filter=_wants_json)
    if log_dir:
        add_file_sink(log_dir, level)
