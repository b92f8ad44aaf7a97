"""Credential and base URL resolution."""

from typing import Dict
from sunsync_bridge.config import SUPERVISOR_API_URL
from .config import AuthMode, ConnectionSettings


def resolve_auth_header(settings: ConnectionSettings) -> str:
    """Authorization header line for the active credential.

    The supervisor token wins when present; otherwise the long-lived token.
    """
    return f"Authorization: Bearer {settings.active_token or ''}"


def auth_headers(settings: ConnectionSettings) -> Dict[str, str]:
    name, _, value = resolve_auth_header(settings).partition(": ")
    return {
        name: value,
        "Content-Type": "application/json",
    }


def resolve_base_url(settings: ConnectionSettings) -> str:
    """API base URL: override, then supervisor proxy, then configured host."""
    if settings.override_url:
        return settings.override_url
    if settings.auth_mode is AuthMode.SUPERVISOR:
        return SUPERVISOR_API_URL
    return settings.direct_api_url
