"""
Logging setup for the API and the CLI.

Two output styles:
- JSON lines, one object per record, for production and for log files
- colored single-line text for a developer terminal

Modules only ever call ``logging.getLogger(__name__)``; handlers are
installed once per process by ``configure_logging`` (from settings) or
``setup_logging`` (explicit arguments).
"""

import json
import logging
import logging.handlers
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import IO, Any, Dict, Optional

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
TEXT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Attributes every LogRecord carries; anything else came in through ``extra=``
_STANDARD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}


class JSONFormatter(logging.Formatter):
    """
    Render a record as one JSON object.

    Keys: timestamp (UTC, ISO 8601), level, logger, message, module,
    function, line, optional exception, the static fields given at
    construction (e.g. app name and environment) and any ``extra=`` values.
    """

    def __init__(self, static_fields: Optional[Dict[str, Any]] = None):
        super().__init__()
        self.static_fields = dict(static_fields or {})

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        payload.update(self.static_fields)

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        payload.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in _STANDARD_ATTRS and not key.startswith("_")
        )
        return json.dumps(payload, default=str, ensure_ascii=False)


class ColoredFormatter(logging.Formatter):
    """Text formatter that colors the level name with ANSI escapes."""

    LEVEL_COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        original = record.levelname
        color = self.LEVEL_COLORS.get(original)
        if color:
            record.levelname = f"{color}{original}{self.RESET}"
        try:
            return super().format(record)
        finally:
            # The record is shared with the other handlers
            record.levelname = original


def _resolve_level(level: str) -> int:
    name = (level or "").upper()
    return getattr(logging, name if name in LEVELS else "INFO")


def setup_logging(
    level: str = "INFO",
    json_format: bool = False,
    log_file: Optional[str] = None,
    console_output: bool = True,
    stream: Optional[IO[str]] = None,
    static_fields: Optional[Dict[str, Any]] = None,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> None:
    """
    Replace the root logger's handlers.

    Args:
        level: Level name; anything unknown means INFO
        json_format: JSON console output instead of colored text
        log_file: Rotating log file path, always written as JSON
        console_output: Install the console handler at all
        stream: Console stream (default: stdout)
        static_fields: Constant fields added to every JSON record
        max_bytes: Log file size that triggers rotation
        backup_count: Rotated files kept

    Examples:
        >>> setup_logging(level="DEBUG")
        >>> setup_logging(json_format=True, log_file="logs/ticketscan.log")
    """
    numeric_level = _resolve_level(level)

    root = logging.getLogger()
    root.setLevel(numeric_level)
    root.handlers.clear()

    if console_output:
        console = logging.StreamHandler(stream or sys.stdout)
        console.setLevel(numeric_level)
        console.setFormatter(
            JSONFormatter(static_fields)
            if json_format
            else ColoredFormatter(fmt=TEXT_FORMAT, datefmt=TEXT_DATE_FORMAT)
        )
        root.addHandler(console)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(JSONFormatter(static_fields))
        root.addHandler(file_handler)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(numeric_level, logging.WARNING))

    logging.getLogger(__name__).debug(
        f"Logging ready: level={logging.getLevelName(numeric_level)}, "
        f"json={json_format}, file={log_file or '-'}"
    )


def configure_logging(settings, level: Optional[str] = None, stream: Optional[IO[str]] = None) -> None:
    """
    Set up logging from application settings.

    Args:
        settings: ``ticketscan.config.Settings``
        level: Overrides ``settings.log_level``
        stream: Console stream (default: stdout)
    """
    setup_logging(
        level=level or settings.log_level,
        json_format=settings.log_json,
        log_file=settings.log_file,
        stream=stream,
        static_fields={"app": settings.app_name, "environment": settings.environment},
    )
