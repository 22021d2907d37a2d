"""
Logging for the catalog service.

All modules log through the ``book_catalog`` logger exported here. Every
record is enriched with the request's correlation ID and with the fields
collected in the request's log context (endpoint, method, user_id):

    set_log_context(user_id=user.id)
    logger.info("Author created")

Console output is human readable in development and JSON in staging and
production (``LOG_CONSOLE_FORMAT``). Errors are also appended as JSON lines
to ``LOG_FILE_PATH``.
"""

import json
import logging
import os
import sys
from contextvars import ContextVar
from typing import Any

from book_catalog.constants import MAX_LOG_SIZE_BYTES
from book_catalog.settings import app_settings

# Per-request fields merged into every JSON log line
log_context: ContextVar[dict[str, Any] | None] = ContextVar(
    "log_context", default=None
)

# Attributes every LogRecord has; anything else came in through ``extra=``
_STANDARD_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime", "correlation_id", "taskName"}

CONSOLE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_correlation_id() -> str:
    # Imported lazily: the middleware module imports this one
    from book_catalog.middlewares.correlation_id import (
        get_correlation_id as current_correlation_id,
    )

    return current_correlation_id()


def set_log_context(**fields: Any) -> None:
    """
    Add fields to the current request's log context.

    Example:
        >>> set_log_context(endpoint="/api/books", method="POST")
    """
    log_context.set({**(log_context.get() or {}), **fields})


def get_log_context() -> dict[str, Any]:
    return log_context.get() or {}


def clear_log_context() -> None:
    log_context.set({})


class StructuredJSONFormatter(logging.Formatter):
    """
    Render a record as one JSON object per line.

    Besides the usual timestamp, level, logger and source location the
    object carries ``request_id``, the log context fields, the running
    ``environment``, any ``extra=`` fields and the formatted exception.
    Overlong messages are cut so a line stays below ``MAX_LOG_SIZE_BYTES``.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "environment": app_settings.ENV.value,
        }

        request_id = get_correlation_id()
        if request_id:
            entry["request_id"] = request_id

        entry.update(get_log_context())
        entry.update(
            (key, value)
            for key, value in record.__dict__.items()
            if key not in _STANDARD_RECORD_ATTRS
        )

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        line = json.dumps(entry, default=str)
        if len(line) > MAX_LOG_SIZE_BYTES:
            keep = MAX_LOG_SIZE_BYTES - (len(line) - len(entry["message"]))
            entry["message"] = (
                entry["message"][: max(keep - 20, 0)] + "... [TRUNCATED]"
            )
            line = json.dumps(entry, default=str)

        return line


class HumanReadableFormatter(logging.Formatter):
    """
    Console formatter for development.

    INFO lines show only the message; every other level also shows where
    the record was logged from.
    """

    SHORT_FMT = "%(asctime)s - [%(correlation_id)s] %(levelname)s: %(message)s"
    DETAILED_FMT = (
        "%(asctime)s - [%(correlation_id)s] %(levelname)s: "
        "%(module)s.%(funcName)s:%(lineno)d - %(message)s"
    )

    def __init__(self, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self._short = logging.Formatter(
            self.SHORT_FMT, datefmt=CONSOLE_DATE_FORMAT
        )
        self._detailed = logging.Formatter(
            self.DETAILED_FMT, datefmt=CONSOLE_DATE_FORMAT
        )

    def format(self, record: logging.LogRecord) -> str:
        record.correlation_id = get_correlation_id() or "-"
        if record.levelno == logging.INFO:
            return self._short.format(record)
        return self._detailed.format(record)


def _error_file_handler(path: str) -> logging.Handler:
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    handler = logging.FileHandler(path)
    handler.setLevel(logging.ERROR)
    handler.setFormatter(StructuredJSONFormatter())
    return handler


def setup_logging() -> logging.Logger:
    """
    Configure the ``book_catalog`` logger from the settings.

    Returns:
        The configured logger.
    """
    catalog_logger = logging.getLogger("book_catalog")
    catalog_logger.setLevel(app_settings.LOG_LEVEL.upper())
    catalog_logger.propagate = False
    catalog_logger.handlers.clear()

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(
        StructuredJSONFormatter()
        if app_settings.LOG_CONSOLE_FORMAT == "json"
        else HumanReadableFormatter()
    )
    catalog_logger.addHandler(console)

    try:
        catalog_logger.addHandler(_error_file_handler(app_settings.LOG_FILE_PATH))
    except OSError as e:
        catalog_logger.warning(f"Could not open error log file: {e}")

    # Keep pytest output clean
    if os.path.basename(sys.argv[0]) == "pytest":
        logging.disable(logging.ERROR)

    return catalog_logger


logger = setup_logging()
