import logging
import os
import sys

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}
DEFAULT_LEVEL = LOG_LEVEL_MAP.get(LOG_LEVEL, logging.INFO)
LOG_JSON = os.getenv("LOG_JSON", "").lower() in ("1", "true", "yes")

MODULE_COLORS = {
    "hass":    "\033[94m",
    "core":    "\033[96m",
    "config":  "\033[95m",
    "scripts": "\033[93m",
}

MODULE_ABBREV = {
    "hass": "HAS",
    "core": "COR",
    "config": "CFG",
    "scripts": "SCR",
}


class Colors:

    @staticmethod
    def _enabled() -> bool:

        if os.getenv("NO_COLOR"):
            return False
        return sys.stdout.isatty()

    @classmethod
    def get(cls, color_code: str) -> str:
        return color_code if cls._enabled() else ""


_COLORS = {
    "RESET": "\033[0m",
    "DIM": "\033[2m",
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
    "TIME": "\033[90m",
    "MODULE": "\033[34m",
    "KEY": "\033[90m",
    "VALUE": "\033[37m",
    "ENTITY": "\033[96m",
    "SUCCESS": "\033[92m",
    "SEPARATOR": "\033[90m",
}

LEVEL_STYLES = {
    "DEBUG": ("DEBUG", "DEBUG"),
    "INFO": (" INFO", "INFO"),
    "WARNING": (" WARN", "WARNING"),
    "ERROR": ("ERROR", "ERROR"),
    "CRITICAL": ("CRIT!", "CRITICAL"),
}


def module_display(name: str) -> str:
    """Short `ABR|submodule` label for a logger name."""
    name_parts = name.split(".")
    prefix = name_parts[0].lower()
    mod_abbrev = MODULE_ABBREV.get(prefix, prefix[:3].upper())

    if len(name_parts) > 1:
        submod = ".".join(name_parts[1:])
        if len(submod) > 9:
            submod = submod[:8] + "…"
        display = f"{mod_abbrev}|{submod}"
    else:
        display = mod_abbrev

    if len(display) > 14:
        display = display[:13] + "…"
    return display
