"""Logging setup for the bucketdeploy command line."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

from loguru import logger

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")

TEXT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<level>{message}</level>"
)


def json_line(record: dict[str, Any]) -> str:
    """Render a loguru record as one JSON object per line.

    Values bound with ``logger.bind`` or passed as keyword arguments land
    next to the message as strings.
    """
    payload = {
        "timestamp": record["time"].isoformat(),
        "level": record["level"].name,
        "message": record["message"],
        "function": record["function"],
    }
    payload.update({key: str(value) for key, value in record["extra"].items()})
    if record["exception"] is not None:
        payload["exception"] = repr(record["exception"].value)

    # the returned string is parsed again as a loguru format template
    serialized = json.dumps(payload, ensure_ascii=False)
    return serialized.replace("{", "{{").replace("}", "}}").replace("<", r"\<") + "\n"


def setup_logging(*, level: str = "INFO", json_format: bool = False, log_file: Path | None = None) -> None:
    """Replace loguru's default sink with a stderr sink and an optional file sink."""
    logger.remove()
    fmt: Any = json_line if json_format else TEXT_FORMAT

    logger.add(sys.stderr, format=fmt, level=level, colorize=not json_format)
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(log_file, format=fmt, level=level, rotation="10 MB", retention="7 days")
