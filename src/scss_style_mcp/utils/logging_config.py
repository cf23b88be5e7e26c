"""Logging setup and structured log helpers for SCSS Style MCP Server."""

import logging
import logging.handlers
import json
import sys
from pathlib import Path
from typing import Optional, Dict, Any, List
from datetime import datetime, UTC

from ..config import LoggingConfig

# Attributes every LogRecord carries; anything else arrived through ``extra``
_RECORD_ATTRIBUTES = set(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {
    "message",
    "asctime",
}

# Third-party loggers kept at WARNING
_QUIET_LOGGERS = ("mcp", "fastmcp", "asyncio", "httpx")

_MAX_LOG_BYTES = 10 * 1024 * 1024


class JSONFormatter(logging.Formatter):
    """One JSON object per record, including ``extra`` fields."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        entry.update(
            (key, value) for key, value in vars(record).items() if key not in _RECORD_ATTRIBUTES
        )
        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable formatter used by the command-line linter."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )


def setup_logging(config: LoggingConfig) -> None:
    """Route all logging to stderr (and optionally a rotating file)."""
    level = getattr(logging, config.level.upper(), logging.INFO)
    formatter: logging.Formatter = (
        JSONFormatter() if config.format.lower() == "json" else TextFormatter()
    )

    # stdout belongs to the MCP stdio transport and the linter's report
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.file:
        log_file = Path(config.file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(log_file, maxBytes=_MAX_LOG_BYTES, backupCount=5)
        )

    root_logger = logging.getLogger()
    for old_handler in root_logger.handlers[:]:
        root_logger.removeHandler(old_handler)
        old_handler.close()

    root_logger.setLevel(level)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the package namespace."""
    return logging.getLogger(f"scss_style_mcp.{name}")


class LoggerMixin:
    """Gives a class a ``logger`` named after it."""

    @property
    def logger(self) -> logging.Logger:
        return get_logger(type(self).__name__)


def log_tool_execution(tool_name: str, parameters: Dict[str, Any]) -> None:
    """Log the start of an MCP tool call."""
    get_logger("tools").info(
        f"{tool_name} started",
        extra={"tool_name": tool_name, "parameters": parameters, "event": "tool_start"},
    )


def log_tool_completion(
    tool_name: str, success: bool, duration: float, error: Optional[str] = None
) -> None:
    """Log the end of an MCP tool call."""
    extra: Dict[str, Any] = {
        "tool_name": tool_name,
        "success": success,
        "duration_ms": round(duration * 1000, 2),
        "event": "tool_complete",
    }
    if error:
        extra["error"] = error

    logger = get_logger("tools")
    if success:
        logger.info(f"{tool_name} completed", extra=extra)
    else:
        logger.error(f"{tool_name} failed", extra=extra)


def log_lint_result(
    filename: Optional[str],
    content_length: int,
    errors_count: int,
    warnings_count: int,
    duration: float,
    cached: bool = False,
) -> None:
    """Log the outcome of linting one stylesheet."""
    get_logger("lint").info(
        f"Linted {filename or '<string>'}: {errors_count} errors, {warnings_count} warnings",
        extra={
            "stylesheet": filename,
            "content_length": content_length,
            "errors": errors_count,
            "warnings": warnings_count,
            "duration_ms": round(duration * 1000, 2),
            "cached": cached,
            "event": "lint_complete",
        },
    )
