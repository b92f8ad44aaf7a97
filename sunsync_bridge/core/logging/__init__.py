from .constants import (
    Colors,
    MODULE_ABBREV,
    MODULE_COLORS,
    module_display,
)
from .decorator import logged
from .formatters import JsonFormatter, PlainFormatter, SmartFormatter
from .structured_logger import StructuredLogger, get_logger, log_message, set_log_level

__all__ = [
    "get_logger",
    "log_message",
    "StructuredLogger",
    "SmartFormatter",
    "PlainFormatter",
    "JsonFormatter",
    "Colors",
    "MODULE_COLORS",
    "MODULE_ABBREV",
    "module_display",
    "set_log_level",
    "logged",
]
