"""
rootpack Structured Logger

Thin wrapper around the standard ``logging`` module that accepts keyword
context on every call and renders records either as JSON lines or as
human readable text.

Usage:
    from rootpack_common.logger import get_logger

    logger = get_logger(__name__)
    logger.info("Loaded manifest", path="modules/foo/composer.json")

Every record carries the current operation id (see ``set_operation_id``)
so the lines belonging to one rebuild can be grouped.
"""

import json
import logging
import sys
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .constants import LOG_LEVELS, Defaults

_operation_id: ContextVar[Optional[str]] = ContextVar("rootpack_operation_id", default=None)

_ROOT_LOGGER_NAME = "rootpack"
_CONTEXT_ATTR = "rootpack_context"


# =============================================================================
# OPERATION ID
# =============================================================================


def set_operation_id(operation_id: Optional[str] = None) -> str:
    """Set the operation id for the current context, generating one if needed."""
    value = operation_id or uuid.uuid4().hex[:12]
    _operation_id.set(value)
    return value


def get_operation_id() -> Optional[str]:
    return _operation_id.get()


def clear_operation_id() -> None:
    _operation_id.set(None)


# =============================================================================
# FORMATTERS
# =============================================================================


class JsonFormatter(logging.Formatter):
    """Render records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        operation_id = getattr(record, "operation_id", None)
        if operation_id:
            payload["operation_id"] = operation_id
        payload.update(getattr(record, _CONTEXT_ATTR, {}) or {})
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class TextFormatter(logging.Formatter):
    """Render records as ``LEVEL logger: message key=value ...``."""

    def format(self, record: logging.LogRecord) -> str:
        line = f"{record.levelname:<7} {record.name}: {record.getMessage()}"
        context = getattr(record, _CONTEXT_ATTR, {}) or {}
        if context:
            line += " " + " ".join(f"{key}={value}" for key, value in context.items())
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class _OperationFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.operation_id = get_operation_id()
        return True


# =============================================================================
# LOGGER
# =============================================================================


class RootpackLogger:
    """
    Logger accepting structured keyword context.

    Keyword arguments other than ``exc_info`` and ``extra`` are attached to the
    record as context and rendered by the configured formatter.
    """

    def __init__(self, name: str):
        if not name.startswith(_ROOT_LOGGER_NAME):
            name = f"{_ROOT_LOGGER_NAME}.{name}"
        self.name = name
        self._logger = logging.getLogger(name)

    def _log(self, level: int, message: str, exc_info: Any = None,
             extra: Optional[Dict[str, Any]] = None, **context: Any) -> None:
        if not self._logger.isEnabledFor(level):
            return
        merged = dict(extra or {})
        merged.update(context)
        self._logger.log(level, message, exc_info=exc_info, extra={_CONTEXT_ATTR: merged})

    def debug(self, message: str, **context: Any) -> None:
        self._log(logging.DEBUG, message, **context)

    def info(self, message: str, **context: Any) -> None:
        self._log(logging.INFO, message, **context)

    def warning(self, message: str, **context: Any) -> None:
        self._log(logging.WARNING, message, **context)

    def error(self, message: str, **context: Any) -> None:
        self._log(logging.ERROR, message, **context)

    def exception(self, message: str, **context: Any) -> None:
        self._log(logging.ERROR, message, exc_info=True, **context)


def get_logger(name: str) -> RootpackLogger:
    """Return a RootpackLogger namespaced under ``rootpack``."""
    return RootpackLogger(name)


def configure_logging(level: str = Defaults.LOG_LEVEL, json_format: bool = False,
                      stream: Any = None) -> None:
    """
    Configure the ``rootpack`` logger hierarchy.

    Args:
        level: One of LOG_LEVELS
        json_format: Emit JSON lines instead of text
        stream: Output stream (defaults to stderr)

    Raises:
        ValueError: If the level is not supported
    """
    if level.lower() not in LOG_LEVELS:
        raise ValueError(f"Unsupported log level: '{level}'. Supported: {', '.join(LOG_LEVELS)}")

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(JsonFormatter() if json_format else TextFormatter())
    handler.addFilter(_OperationFilter())

    root = logging.getLogger(_ROOT_LOGGER_NAME)
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level.upper())
    root.propagate = False
