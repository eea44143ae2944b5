"""Disk error log written as one JSON object per line.

Errors reported by commands land in ``errors.log`` under the platform user
log directory, each entry carrying a timestamp, the message, the formatted
traceback, and free-form context such as the operation and project id.
"""

from __future__ import annotations

import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from pathlib import Path

from platformdirs import user_log_path

APP_NAME = "vercelx"
LOG_FILENAME = "errors.log"
ERROR_LOG_PATH = Path(user_log_path(APP_NAME, appauthor=False)) / LOG_FILENAME

logger = logging.getLogger("vercelx.errors")
logger.propagate = False


class JsonLineFormatter(logging.Formatter):
    """Render ``log_error`` records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "error": record.getMessage(),
            "stack": getattr(record, "stack", None),
            "context": getattr(record, "context", {}),
        }
        return json.dumps(entry, default=str)


def _ensure_handler() -> bool:
    """Attach a file handler for the current ``ERROR_LOG_PATH`` if missing."""
    target = str(ERROR_LOG_PATH)
    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == target:
            return True
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    try:
        ERROR_LOG_PATH.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(ERROR_LOG_PATH, encoding="utf-8", delay=True)
    except OSError:
        return False
    handler.setFormatter(JsonLineFormatter())
    logger.addHandler(handler)
    logger.setLevel(logging.ERROR)
    return True


def _format_stack(error: BaseException | str) -> str | None:
    if not isinstance(error, BaseException) or error.__traceback__ is None:
        return None
    return "".join(traceback.format_exception(type(error), error, error.__traceback__))


def log_error(error: BaseException | str, **context: object) -> None:
    """Append ``error`` to the error log; failures are reported to stderr only."""
    try:
        if not _ensure_handler():
            raise OSError(f"cannot open {ERROR_LOG_PATH}")
        logger.error(
            str(error),
            extra={"stack": _format_stack(error), "context": context},
        )
    except Exception as exc:
        print(f"Failed to write to error log: {exc}", file=sys.stderr)
        print(f"Original error: {error}", file=sys.stderr)


def close_error_log() -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def clear_error_log() -> None:
    """Delete the error log file if present."""
    close_error_log()
    try:
        ERROR_LOG_PATH.unlink(missing_ok=True)
    except OSError:
        pass
