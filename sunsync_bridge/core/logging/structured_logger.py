import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Optional

from .constants import DEFAULT_LEVEL, LOG_JSON, LOG_LEVEL_MAP
from .formatters import JsonFormatter, PlainFormatter, SmartFormatter


def _configure_root_logger():

    root = logging.getLogger()
    if not root.handlers:
        root.addHandler(logging.NullHandler())


_configure_root_logger()


class StructuredLogger:
    """Thin wrapper over `logging.Logger` taking key/value fields as kwargs."""

    def __init__(self, name: str, level: Optional[int] = None):
        self._logger = logging.getLogger(name)
        effective_level = level or DEFAULT_LEVEL
        self._logger.setLevel(effective_level)

        if not self._logger.handlers:

            console = logging.StreamHandler(sys.stdout)
            console.setFormatter(JsonFormatter() if LOG_JSON else SmartFormatter(use_colors=True))
            console.setLevel(effective_level)
            self._logger.addHandler(console)

            log_dir = os.getenv("SUNSYNC_LOG_DIR")
            if log_dir and Path(log_dir).is_dir():
                fh = RotatingFileHandler(
                    Path(log_dir) / "sunsync_bridge.log",
                    encoding="utf-8",
                    maxBytes=5 * 1024 * 1024,
                    backupCount=3
                )
                fh.setFormatter(PlainFormatter())
                fh.setLevel(logging.DEBUG)
                self._logger.addHandler(fh)

            self._logger.propagate = False

    def _log(self, level: int, msg: str, **kwargs: Any) -> None:
        if not self._logger.isEnabledFor(level):
            return
        record = self._logger.makeRecord(
            self._logger.name, level, "", 0, msg, (), None
        )
        record.extra_data = kwargs
        self._logger.handle(record)

    def debug(self, msg: str, **kwargs) -> None:
        self._log(logging.DEBUG, msg, **kwargs)

    def info(self, msg: str, **kwargs) -> None:
        self._log(logging.INFO, msg, **kwargs)

    def warning(self, msg: str, **kwargs) -> None:
        self._log(logging.WARNING, msg, **kwargs)

    def error(self, msg: str, **kwargs) -> None:
        self._log(logging.ERROR, msg, **kwargs)

    def critical(self, msg: str, **kwargs) -> None:
        self._log(logging.CRITICAL, msg, **kwargs)


_loggers: dict[str, StructuredLogger] = {}


def get_logger(name: str = "sunsync") -> StructuredLogger:

    if name not in _loggers:
        _loggers[name] = StructuredLogger(name)
    return _loggers[name]


def set_log_level(level: str) -> None:

    numeric = LOG_LEVEL_MAP.get(level.upper(), logging.DEBUG)
    for logger in _loggers.values():
        logger._logger.setLevel(numeric)
        for h in logger._logger.handlers:
            if isinstance(h, logging.StreamHandler) and not isinstance(h, RotatingFileHandler):
                h.setLevel(numeric)


def log_message(level: str, text: str) -> None:
    """Fire-and-forget entry point for callers that only have a level name."""
    numeric = LOG_LEVEL_MAP.get(level.upper(), logging.INFO)
    get_logger("sunsync")._log(numeric, text)
