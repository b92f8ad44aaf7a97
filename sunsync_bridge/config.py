import os
from typing import Mapping, Optional
from dotenv import load_dotenv
from sunsync_bridge.core.logging import get_logger
_log = get_logger("config")

load_dotenv()

APP_VERSION = os.getenv("SUNSYNC_BRIDGE_VERSION", "1.0")

# Supervisor proxy for the Home Assistant Core API (add-on networking)
SUPERVISOR_API_URL = "http://supervisor/core/api"

DEFAULT_HA_PORT = 8123
DEFAULT_CONNECT_TYPE = "http"

_TRUE_VALUES = ("1", "true", "yes", "on")


def _get_int_env(name: str, default: int, environ: Optional[Mapping[str, str]] = None) -> int:
    """Get integer value from environment variable.

    Args:
        name: Environment variable name
        default: Default value if not set or invalid
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        Integer value from env or default
    """
    raw = (os.environ if environ is None else environ).get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        _log.warning("Invalid int env", env=name, value=raw)
        return default


def _get_float_env(name: str, default: float, environ: Optional[Mapping[str, str]] = None) -> float:
    """Get float value from environment variable.

    Args:
        name: Environment variable name
        default: Default value if not set or invalid
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        Float value from env or default
    """
    raw = (os.environ if environ is None else environ).get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        _log.warning("Invalid float env", env=name, value=raw)
        return default


def _get_bool_env(name: str, default: bool = False, environ: Optional[Mapping[str, str]] = None) -> bool:
    raw = (os.environ if environ is None else environ).get(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in _TRUE_VALUES


# Request timeout for regular API calls (seconds)
HASS_TIMEOUT = _get_float_env("HASS_TIMEOUT", 10.0)

# Timeout for HEAD reachability probes used during host discovery
HA_REACHABILITY_TIMEOUT = _get_float_env("HA_REACHABILITY_TIMEOUT", 3.0)


def load_settings(environ: Optional[Mapping[str, str]] = None):
    """Build ConnectionSettings from the environment.

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        A fresh ConnectionSettings; callers own it and pass it around.
    """
    # Lazy import to avoid circular dependency (hass_ops reads config constants)
    from sunsync_bridge.core.hass_ops.config import ConnectionSettings

    env = os.environ if environ is None else environ

    settings = ConnectionSettings(
        supervisor_token=env.get("SUPERVISOR_TOKEN") or None,
        ha_token=env.get("HA_TOKEN") or None,
        ha_ip=env.get("HA_IP", ""),
        ha_port=_get_int_env("HA_PORT", DEFAULT_HA_PORT, env),
        port_configured=bool(env.get("HA_PORT")),
        scheme=(env.get("HTTP_CONNECT_TYPE") or DEFAULT_CONNECT_TYPE).lower(),
        override_url=(env.get("API_BASE_URL_OVERRIDE") or "").rstrip("/") or None,
        verbose=_get_bool_env("ENABLE_VERBOSE_LOG", False, env),
        request_timeout=_get_float_env("HASS_TIMEOUT", HASS_TIMEOUT, env),
        reachability_timeout=_get_float_env("HA_REACHABILITY_TIMEOUT", HA_REACHABILITY_TIMEOUT, env),
    )
    _log.debug(
        "Settings loaded",
        mode=settings.auth_mode.value,
        host=settings.ha_ip,
        port=settings.ha_port,
        override=settings.override_url,
    )
    return settings
