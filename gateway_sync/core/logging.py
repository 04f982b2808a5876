"""
Logging configuration.

- **Console handler** — human-readable coloured output, the primary stream
  for a controller running in a pod (stdout is collected by the cluster).
- **JSON structured logging** — machine-parsable log lines written to
  rotating files when ``LOG_DIR`` is set.
- **Structured extras** — the entity-error parser attaches ``entity_type``
  and ``entity_key`` to its warnings through ``extra=``, and callers that
  record a classified push failure attach ``failure_reason``; both formatters
  surface them.

Usage:
    Call ``setup_logging()`` once during controller startup. All modules that
    call ``logging.getLogger(__name__)`` inherit the configured handlers.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional

from gateway_sync.core.config import settings

# Extras promoted to top-level JSON keys when present on a record.
STRUCTURED_FIELDS = ("entity_type", "entity_key", "failure_reason")


class JSONFormatter(logging.Formatter):
    """
    Formats log records as single-line JSON objects.

    Output example::

        {"timestamp": "2025-02-17T10:30:00.123000+00:00", "level": "WARNING",
         "logger": "gateway_sync.push", "message": "could not resolve owner ...",
         "module": "entity_errors", "function": "_resolve", "line": 42,
         "entity_type": "routes", "entity_key": 3}
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info and record.exc_info[0] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)

        for key in STRUCTURED_FIELDS:
            val = getattr(record, key, None)
            if val is not None:
                log_entry[key] = val

        return json.dumps(log_entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """
    Human-readable formatter for terminal output.

    Uses ANSI colour codes to highlight log levels; structured extras are
    appended as ``key=value`` pairs.
    """

    COLOURS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        colour = self.COLOURS.get(record.levelname, self.RESET)
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc).strftime(
            "%Y-%m-%d %H:%M:%S"
        )

        extras = " ".join(
            f"{key}={getattr(record, key)}"
            for key in STRUCTURED_FIELDS
            if getattr(record, key, None) is not None
        )

        base = (
            f"{timestamp} | {colour}{record.levelname:<8}{self.RESET} | "
            f"{record.name} | {record.getMessage()}"
        )
        if extras:
            base += f" | {extras}"
        if record.exc_info and record.exc_info[0] is not None:
            base += "\n" + self.formatException(record.exc_info)
        return base


def setup_logging(root_logger: Optional[logging.Logger] = None) -> None:
    """
    Configure the root logger (or ``root_logger``) with a console handler
    and, optionally, rotating JSON file handlers.

    Subsequent calls are idempotent (handlers are checked before adding).

    Configuration (via environment variables / ``Settings``):
    - ``DEBUG=true`` → all loggers set to DEBUG.
    - ``LOG_LEVEL`` → root log level (default: INFO).
    - ``LOG_DIR`` → directory for ``gateway-sync.log`` and
      ``gateway-sync-error.log``; empty disables file output.
    - ``LOG_FILE_MAX_BYTES`` / ``LOG_FILE_BACKUP_COUNT`` → rotation policy.
    """
    if root_logger is None:
        root_logger = logging.getLogger()

    # Prevent duplicate handlers on repeated calls
    if root_logger.handlers:
        return

    level = logging.DEBUG if settings.DEBUG else getattr(logging, settings.LOG_LEVEL, logging.INFO)
    root_logger.setLevel(level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(ConsoleFormatter())
    root_logger.addHandler(console_handler)

    if settings.LOG_DIR:
        os.makedirs(settings.LOG_DIR, exist_ok=True)

        file_handler = RotatingFileHandler(
            filename=os.path.join(settings.LOG_DIR, "gateway-sync.log"),
            maxBytes=settings.LOG_FILE_MAX_BYTES,
            backupCount=settings.LOG_FILE_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(file_handler)

        # Error-only file (separate stream for alerting)
        error_handler = RotatingFileHandler(
            filename=os.path.join(settings.LOG_DIR, "gateway-sync-error.log"),
            maxBytes=settings.LOG_FILE_MAX_BYTES,
            backupCount=settings.LOG_FILE_BACKUP_COUNT,
            encoding="utf-8",
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(error_handler)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    root_logger.info(
        "Logging initialized — level=%s, log_dir=%s",
        logging.getLevelName(level),
        settings.LOG_DIR or "<console only>",
    )
