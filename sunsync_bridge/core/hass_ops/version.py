"""Home Assistant version detection and registry endpoint selection."""

import json
import re
from typing import Optional
import httpx
from sunsync_bridge.core.logging import get_logger
from .api import hass_request
from .auth import resolve_base_url
from .config import ConnectionSettings, LEGACY_REGISTRY_ENDPOINT, MODERN_REGISTRY_ENDPOINT

_log = get_logger("hass.version")

VERSION_PATTERN = re.compile(r'"version": *"([^"]*)"')
MODERN_VERSION = re.compile(r"^202[3-9]\.")


def extract_version(body: str) -> Optional[str]:
    """Version string from the API root body.

    A top-level JSON `version` string is used when the body parses; otherwise
    the first `"version": "<value>"` occurrence in the raw text.
    """
    if not body or "version" not in body:
        return None
    try:
        data = json.loads(body)
    except ValueError:
        data = None
    if isinstance(data, dict) and isinstance(data.get("version"), str) and data["version"]:
        return data["version"]
    match = VERSION_PATTERN.search(body)
    if match and match.group(1):
        return match.group(1)
    return None


def select_registry_endpoint(version: str) -> str:
    """2023.x and later use the modern entity registry endpoint."""
    if MODERN_VERSION.match(version):
        return MODERN_REGISTRY_ENDPOINT
    return LEGACY_REGISTRY_ENDPOINT


def negotiate_version(
    settings: ConnectionSettings,
    client: Optional[httpx.Client] = None,
) -> Optional[str]:
    """Read the API version and pick the registry endpoint. Best effort.

    Returns:
        The detected version, or None (settings left unchanged)
    """
    _log.info("Checking Home Assistant API version")
    result = hass_request(settings, "GET", f"{resolve_base_url(settings)}/", client=client)

    if not result.success:
        _log.warning("Could not determine Home Assistant API version", status=result.status)
        return None

    version = extract_version(result.body)
    if not version:
        _log.warning("Could not determine Home Assistant API version")
        return None

    settings.set_api_version(version)
    endpoint = select_registry_endpoint(version)
    settings.set_registry_endpoint(endpoint)
    _log.info(
        "Home Assistant API version",
        version=version,
        registry=endpoint,
        style="modern" if endpoint == MODERN_REGISTRY_ENDPOINT else "legacy",
    )
    return version
