# pageprobe/utils/logger.py
from __future__ import annotations

"""Logging for the pageprobe package.

Library code only ever asks for loggers under the ``pageprobe`` namespace;
importing it does not touch the root logger or any other package's logger.
Console (rich) and JSON file handlers are attached by ``configure_logging()``,
which the CLI calls. Host applications can skip it and route the
``pageprobe`` records through their own handlers instead.
"""

import json
import logging
import threading
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional

from rich.console import Console
from rich.logging import RichHandler

from pageprobe.utils.config import get_settings, LogLevel


__all__ = [
    "ROOT_LOGGER_NAME",
    "configure_logging",
    "get_logger",
    "set_log_level",
    "bind",
    "unbind",
]

ROOT_LOGGER_NAME = "pageprobe"

_config_lock = threading.Lock()
_handlers: list[logging.Handler] = []
_global_extra: Dict[str, Any] = {}

# No "No handlers could be found" fallback output for library users.
logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())


class JsonFormatter(logging.Formatter):
    """One JSON object per line; `record.extra` (bound context) is merged in."""

    default_time_format = "%Y-%m-%dT%H:%M:%S"

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).strftime(self.default_time_format),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "thread": record.threadName,
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        bound = getattr(record, "extra", None)
        if isinstance(bound, dict):
            payload.update(bound)
        return json.dumps(payload, ensure_ascii=False)


def _to_level(level: LogLevel | str | None) -> int:
    if level is None:
        level = get_settings().LOG_LEVEL
    name = level if isinstance(level, str) else level.value
    return getattr(logging, name.upper(), logging.INFO)


def configure_logging(level: LogLevel | str | None = None) -> logging.Logger:
    """
    Attach the console handler (and the rotating JSON file handler when
    LOG_TO_FILE is set) to the ``pageprobe`` logger. Calling it again only
    adjusts the level.
    """
    pkg = logging.getLogger(ROOT_LOGGER_NAME)
    py_level = _to_level(level)

    with _config_lock:
        if not _handlers:
            settings = get_settings()
            rich_handler = RichHandler(
                console=Console(stderr=True, force_jupyter=False, color_system="auto"),
                show_time=True,
                show_path=False,
                rich_tracebacks=True,
                markup=settings.COLORIZED_OUTPUT,
                omit_repeated_times=False,
            )
            rich_handler.setFormatter(logging.Formatter("%(message)s"))
            _handlers.append(rich_handler)

            if settings.LOG_TO_FILE:
                settings.LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
                file_handler = RotatingFileHandler(
                    filename=str(settings.LOG_FILE),
                    maxBytes=5 * 1024 * 1024,
                    backupCount=5,
                    encoding="utf-8",
                    delay=True,
                )
                file_handler.setFormatter(JsonFormatter())
                _handlers.append(file_handler)

            for h in _handlers:
                pkg.addHandler(h)

            # playwright is chatty at DEBUG
            logging.getLogger("playwright").setLevel(max(py_level, logging.WARNING))

        pkg.setLevel(py_level)
        for h in _handlers:
            h.setLevel(py_level)

    return pkg


def get_logger(name: Optional[str] = None) -> logging.LoggerAdapter:
    """
    Logger under the ``pageprobe`` namespace, wrapped so bound context
    travels with every record. Has no configuration side effects.
    """
    if not name or name == "__main__":
        name = ROOT_LOGGER_NAME
    elif name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.LoggerAdapter(logging.getLogger(name), extra={"extra": _global_extra})


def set_log_level(level: LogLevel | str) -> None:
    configure_logging(level)


def bind(**kwargs: Any) -> None:
    """Attach context (e.g. run_id="20261019T120000Z") to every later record."""
    _global_extra.update(kwargs)


def unbind(*keys: str) -> None:
    for k in keys:
        _global_extra.pop(k, None)
