"""Structured logging for the studio core.

Every module logs through ``get_logger(__name__)``. Lane, model and other
identifiers go in ``extra=`` and end up under ``context`` in the JSON output.
"""

import json
import logging
import logging.config
import os
from datetime import datetime, timezone
from pathlib import Path

from .config import DEFAULT_LOG_PATH

CONTEXT_FIELDS = ("lane", "model", "message_id", "attempt", "poll")

MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5


class JSONFormatter(logging.Formatter):
    """One JSON object per line, with lane/model context when present."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        context = {}
        for key in CONTEXT_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                context[key] = value
        if context:
            entry["context"] = context

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(
    log_level: str | None = None,
    log_file: str | None = None,
    console_format: str | None = None,
) -> None:
    """Configure the root logger with a rotating JSON file and a console stream.

    Unset arguments fall back to ``LOG_LEVEL`` (INFO), ``04_logs/app.log`` and
    ``LOG_FORMAT`` ("json" or "text").
    """
    level = (log_level or os.getenv("LOG_LEVEL", "INFO")).upper()
    log_path = Path(log_file) if log_file else DEFAULT_LOG_PATH
    console_format = console_format or os.getenv("LOG_FORMAT", "json")

    log_path.parent.mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {"()": "studio.logging_config.JSONFormatter"},
                "text": {"format": "%(asctime)s %(levelname)-8s %(name)s: %(message)s"},
            },
            "handlers": {
                "file": {
                    "class": "logging.handlers.RotatingFileHandler",
                    "filename": str(log_path),
                    "maxBytes": MAX_LOG_BYTES,
                    "backupCount": LOG_BACKUPS,
                    "formatter": "json",
                    "encoding": "utf-8",
                },
                "console": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stdout",
                    "formatter": "text" if console_format == "text" else "json",
                },
            },
            # SDK request logging is noisy at INFO
            "loggers": {
                "httpx": {"level": "WARNING"},
                "google_genai": {"level": "WARNING"},
            },
            "root": {"level": level, "handlers": ["file", "console"]},
        }
    )


def get_logger(name: str) -> logging.Logger:
    """Module logger; pass ``__name__``."""
    return logging.getLogger(name)
