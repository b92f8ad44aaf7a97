"""Operator troubleshooting dump. Read-only: never changes settings."""

import os
import re
from typing import Any, Dict, Optional
import httpx
from sunsync_bridge.core.logging import get_logger
from sunsync_bridge.core.utils.http_pool import get_client
from .api import hass_request
from .auth import resolve_base_url
from .config import AuthMode, ConnectionSettings
from .verify import count_entities

_log = get_logger("hass.diagnostics")

TOKEN_FORMAT = re.compile(r"^[a-zA-Z0-9_.\-]+$")


def _head_status(url: str, client: httpx.Client, timeout: float) -> int:
    try:
        return client.head(url, timeout=timeout).status_code
    except (httpx.RequestError, httpx.InvalidURL):
        return 0


def diagnose_ha_setup(
    settings: ConnectionSettings,
    client: Optional[httpx.Client] = None,
) -> Dict[str, Any]:
    """Log and return the resolved configuration and what the API answers."""
    client = client or get_client(timeout=settings.request_timeout)
    base = resolve_base_url(settings)
    report: Dict[str, Any] = {"auth_mode": settings.auth_mode.value, "api_url": base}

    _log.info("===== DIAGNOSTIC INFORMATION =====")

    if settings.auth_mode is AuthMode.SUPERVISOR:
        report["token_length"] = len(settings.supervisor_token or "")
        _log.info("Using Supervisor token for authentication", token_len=report["token_length"])
    else:
        token = settings.ha_token or ""
        report["token_length"] = len(token)
        report["token_prefix"] = token[:5]
        report["ha_url"] = settings.direct_root
        _log.info(
            "Using long-lived token for authentication",
            url=report["ha_url"],
            token_len=len(token),
            token_start=f"{token[:5]}...",
        )
    _log.info("API URL", url=base)

    addon_name, addon_version = os.getenv("ADDON_NAME"), os.getenv("ADDON_VERSION")
    if addon_name or addon_version:
        report["addon"] = {"name": addon_name, "version": addon_version}
        _log.info("Add-on", name=addon_name, version=addon_version)

    report["basic_status"] = _head_status(f"{base}/", client, settings.reachability_timeout)
    _log.info("Basic connectivity", status=report["basic_status"])

    if settings.auth_mode is AuthMode.LONG_LIVED_TOKEN and settings.ha_token:
        report["token_format_ok"] = bool(TOKEN_FORMAT.match(settings.ha_token))
        if not report["token_format_ok"]:
            _log.warning("Token contains potentially invalid characters")

    api = hass_request(settings, "GET", f"{base}/", client=client)
    report["api_status"] = api.status
    report["api_ok"] = api.success
    _log.info("API access result", status=api.status)

    if api.success:
        total, own = count_entities(settings, client)
        report["entities_total"] = total
        report["entities_sunsync"] = own
        _log.info("API access successful", entities=total, sunsync=own)
    else:
        _log.error("API access failed", err=str(api.error) if api.error else None)

    _log.info("===== END DIAGNOSTIC INFORMATION =====")
    return report
