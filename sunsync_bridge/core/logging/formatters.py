import json
import logging
from datetime import datetime
from typing import Any

from .constants import (
    LEVEL_STYLES,
    MODULE_COLORS,
    Colors,
    _COLORS,
    module_display,
)


def _extras(record: logging.LogRecord) -> dict:
    return getattr(record, "extra_data", None) or {}


class SmartFormatter(logging.Formatter):
    """Coloured single-line console format: `time level [module] msg │ k=v`."""

    HIGHLIGHT_KEYS = {
        "ent": "ENTITY",
        "entity_id": "ENTITY",
        "url": "ENTITY",
        "status": "SUCCESS",
        "err": "ERROR",
        "error": "ERROR",
    }

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors and Colors._enabled()

    def _c(self, key: str) -> str:

        if not self.use_colors:
            return ""
        return _COLORS.get(key, "")

    def _format_value(self, value: Any, max_len: int = 80) -> str:

        if value is None:
            return "null"

        if isinstance(value, bool):
            return "yes" if value else "no"

        if isinstance(value, (int, float)):
            return str(value)

        if isinstance(value, (list, tuple)):
            if len(value) <= 3:
                return f"[{', '.join(str(v) for v in value)}]"
            return f"[{len(value)} items]"

        if isinstance(value, dict):
            return f"{{{len(value)} keys}}"

        s = str(value)
        if len(s) > max_len:
            return s[:max_len-3] + "..."
        return s

    def _module_color(self, name: str) -> str:

        if not self.use_colors:
            return ""
        prefix = name.split(".")[0].lower()
        return MODULE_COLORS.get(prefix, _COLORS["MODULE"])

    def format(self, record: logging.LogRecord) -> str:
        label, color_key = LEVEL_STYLES.get(record.levelname, (record.levelname[:5], "INFO"))

        c_reset = self._c("RESET")
        c_level = self._c(color_key)
        c_key = self._c("KEY")
        c_value = self._c("VALUE")
        c_sep = self._c("SEPARATOR")

        now = datetime.now()
        timestamp = now.strftime("%H:%M:%S") + f".{now.microsecond // 1000:03d}"

        line = " ".join([
            f"{self._c('TIME')}{timestamp}{c_reset}",
            f"{c_level}{label}{c_reset}",
            f"[{self._module_color(record.name)}{module_display(record.name):14}{c_reset}]",
            record.getMessage(),
        ])

        extras = []
        for key, value in _extras(record).items():
            highlight = self.HIGHLIGHT_KEYS.get(key.lower())
            key_color = self._c(highlight) if highlight else c_key
            extras.append(f"{key_color}{key}{c_reset}={c_value}{self._format_value(value)}{c_reset}")
        if extras:
            line += f" {c_sep}│{c_reset} " + " ".join(extras)

        if record.exc_info:
            line += f"\n{c_level}{self.formatException(record.exc_info)}{c_reset}"

        return line


class PlainFormatter(logging.Formatter):

    def format(self, record: logging.LogRecord) -> str:
        now = datetime.now()
        timestamp = now.strftime("%Y-%m-%d %H:%M:%S.") + f"{now.microsecond // 1000:03d}"

        line = f"{timestamp} {record.levelname:7} [{module_display(record.name):14}] {record.getMessage()}"

        extras = [f"{k}={v}" for k, v in _extras(record).items()]
        if extras:
            line += " │ " + " ".join(extras)

        if record.exc_info:
            line += f"\n{self.formatException(record.exc_info)}"

        return line


class JsonFormatter(logging.Formatter):

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.now().astimezone().isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        payload.update(_extras(record))

        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)
