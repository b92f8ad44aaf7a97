import functools
import logging
from typing import Callable, TypeVar, ParamSpec

P = ParamSpec('P')
T = TypeVar('T')


def logged(
    entry: bool = True,
    exit: bool = True,
    level: int = logging.DEBUG,
):
    """Trace entry/exit of a call; results exposing `success` are logged with it."""
    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        module = func.__module__
        if module.startswith("sunsync_bridge.core."):
            module = module[len("sunsync_bridge.core."):]
        elif module.startswith("sunsync_bridge."):
            module = module[len("sunsync_bridge."):]
        logger_name = module.replace("hass_ops", "hass")

        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            from .structured_logger import get_logger
            _log = get_logger(logger_name)
            fn_name = func.__name__

            if entry:
                _log._log(level, f"→ {fn_name}")

            try:
                result = func(*args, **kwargs)
            except Exception as e:
                _log.error(f"✗ {fn_name}", error=str(e)[:100])
                raise

            if exit:
                success = getattr(result, "success", None)
                if success is None:
                    _log._log(level, f"← {fn_name}")
                else:
                    _log._log(level, f"← {fn_name}", ok=success)
            return result

        return wrapper

    return decorator
