# component_locator/utils/logger.py
from __future__ import annotations

"""Package logging
------------------
Everything logs under the `component_locator` logger. Handlers are attached
once from Settings: a rich console handler on stderr and, with LOG_TO_FILE,
a rotating file of JSON lines. Structured fields ride along in
`record.context` and are flattened into the JSON payload.
"""

import json
import logging
import threading
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional

from rich.console import Console
from rich.logging import RichHandler

from component_locator.utils.config import LogLevel, Settings, get_settings

__all__ = [
    "PACKAGE_LOGGER",
    "JsonFormatter",
    "configure_logging",
    "get_logger",
    "set_log_level",
    "log_with_context",
]

PACKAGE_LOGGER = "component_locator"

_lock = threading.Lock()
_configured = False


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        context = getattr(record, "context", None)
        if isinstance(context, dict):
            payload.update({str(k): _jsonable(v) for k, v in context.items()})
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def _jsonable(value: Any) -> Any:
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    return repr(value)


def _level_for(settings: Settings) -> int:
    if settings.DEBUG_MODE:
        return logging.DEBUG
    return getattr(logging, LogLevel(settings.LOG_LEVEL).value, logging.INFO)


def _console_handler(settings: Settings, level: int) -> logging.Handler:
    console = Console(stderr=True, color_system="auto" if settings.COLORIZED_OUTPUT else None)
    handler = RichHandler(console=console, show_path=False, rich_tracebacks=True, markup=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    handler.setLevel(level)
    return handler


def _file_handler(settings: Settings, level: int) -> logging.Handler:
    settings.LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        filename=str(settings.LOG_FILE),
        maxBytes=5 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
        delay=True,
    )
    handler.setFormatter(JsonFormatter())
    handler.setLevel(level)
    return handler


def configure_logging(settings: Optional[Settings] = None, *, force: bool = False) -> logging.Logger:
    """
    Attach the package handlers. Repeat calls are no-ops unless `force` is
    set, in which case the current handlers are closed and rebuilt from
    `settings` (or the process settings).
    """
    global _configured
    with _lock:
        pkg = logging.getLogger(PACKAGE_LOGGER)
        if _configured and not force:
            return pkg

        settings = settings or get_settings()
        level = _level_for(settings)
        for handler in list(pkg.handlers):
            pkg.removeHandler(handler)
            handler.close()

        pkg.setLevel(level)
        pkg.addHandler(_console_handler(settings, level))
        if settings.LOG_TO_FILE:
            pkg.addHandler(_file_handler(settings, level))

        logging.getLogger("playwright").setLevel(max(level, logging.WARNING))
        _configured = True
        return pkg


def get_logger(name: Optional[str] = None) -> logging.LoggerAdapter:
    configure_logging()
    return logging.LoggerAdapter(logging.getLogger(name or PACKAGE_LOGGER), {"context": {}})


def set_log_level(level: LogLevel | str) -> None:
    """Change the package level (and its handlers') at runtime."""
    pkg = configure_logging()
    name = level.value if isinstance(level, LogLevel) else str(level).upper()
    py_level = getattr(logging, LogLevel(name).value)
    pkg.setLevel(py_level)
    for handler in pkg.handlers:
        handler.setLevel(py_level)


def log_with_context(logger: logging.LoggerAdapter, **context: Any) -> logging.LoggerAdapter:
    """
    Same logger, with `context` added to every record:
        log_with_context(log, component="Input").info("resolved")
    """
    merged = dict((logger.extra or {}).get("context", {}))
    merged.update(context)
    return logging.LoggerAdapter(logger.logger, {"context": merged})
