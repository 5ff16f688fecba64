"""Structured logging for vitals.

Every record emitted while an execute() call is in flight carries that run's
execution id, in both the JSON and the text format.
"""

import json
import logging
import os
import sys
import uuid
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import IO, Any

execution_id_var: ContextVar[str] = ContextVar("execution_id", default="")

# Access logs from the HTTP layers that usually host the health endpoint
NOISY_LOGGERS = ("aiohttp.access", "uvicorn.access")


class JSONFormatter(logging.Formatter):
    """Render each record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "source": f"{record.module}:{record.funcName}:{record.lineno}",
        }

        execution_id = execution_id_var.get()
        if execution_id:
            log_data["execution_id"] = execution_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        extra_fields = getattr(record, "extra_fields", None)
        if isinstance(extra_fields, dict):
            log_data.update(extra_fields)

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable lines, tagged with the execution id when one is set."""

    def __init__(self) -> None:
        super().__init__("%(asctime)s %(levelname)-8s %(name)s%(execution)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        execution_id = execution_id_var.get()
        record.execution = f" [{execution_id}]" if execution_id else ""
        return super().format(record)


FORMATTERS: dict[str, type[logging.Formatter]] = {
    "json": JSONFormatter,
    "text": TextFormatter,
}


def configure_logging(
    level: str | None = None,
    fmt: str | None = None,
    stream: IO[str] | None = None,
) -> None:
    """Install a single root handler writing to stream (stdout by default).

    level and fmt fall back to LOG_LEVEL (default INFO) and LOG_FORMAT
    (json or text, default json).

    Raises:
        ValueError: If the level or format is not recognised.
    """
    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    format_name = (fmt or os.getenv("LOG_FORMAT", "json")).lower()

    levels = logging.getLevelNamesMapping()
    if level_name not in levels:
        raise ValueError(f"Unknown log level: {level_name}")
    if format_name not in FORMATTERS:
        raise ValueError(
            f"Unknown log format: {format_name}, expected one of {', '.join(FORMATTERS)}"
        )

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(FORMATTERS[format_name]())

    root_logger = logging.getLogger()
    root_logger.setLevel(levels[level_name])
    root_logger.handlers[:] = [handler]

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def new_execution_id() -> str:
    """Short random id for one aggregation run."""
    return uuid.uuid4().hex[:8]
