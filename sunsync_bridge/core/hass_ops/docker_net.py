"""Docker networking workaround: find a host address that reaches Home Assistant.

Only relevant in long-lived token mode, where the add-on talks to the
configured HA_IP directly and that address may not be routable from inside
the container (Docker bridge, Tailscale, ...).
"""

import socket
import struct
from pathlib import Path
from typing import Optional
import httpx
from sunsync_bridge.core.logging import get_logger
from sunsync_bridge.core.resilience.fallback_chain import FallbackChain
from sunsync_bridge.core.utils.http_pool import get_client
from .config import (
    AuthMode,
    ConnectionSettings,
    DOCKER_FALLBACK_HOSTS,
    DOCKER_HOST_NAME,
)

_log = get_logger("hass.docker_net")

ROUTE_TABLE = Path("/proc/net/route")


def check_basic_connectivity(
    url: str,
    timeout: float = 3.0,
    client: Optional[httpx.Client] = None,
) -> bool:
    """Unauthenticated HEAD; reachable only when the answer is below 400."""
    client = client or get_client()
    try:
        resp = client.head(url, timeout=timeout)
    except (httpx.RequestError, httpx.InvalidURL) as e:
        _log.debug("Unreachable", url=url, err=str(e)[:80])
        return False
    reachable = resp.status_code < 400
    _log.debug("HEAD answered", url=url, status=resp.status_code, ok=reachable)
    return reachable


def default_gateway(route_table: Path = ROUTE_TABLE) -> Optional[str]:
    """Default route gateway from the kernel routing table, if any."""
    try:
        lines = route_table.read_text().splitlines()[1:]
    except OSError:
        return None
    for line in lines:
        fields = line.split()
        if len(fields) < 3 or fields[1] != "00000000":
            continue
        try:
            return socket.inet_ntoa(struct.pack("<L", int(fields[2], 16)))
        except (ValueError, struct.error):
            return None
    return None


def resolve_host(name: str) -> Optional[str]:
    try:
        return socket.gethostbyname(name)
    except OSError:
        return None


def _candidate_url(settings: ConnectionSettings, host: str) -> str:
    return f"{settings.scheme}://{host}:{settings.ha_port}/api"


def detect_docker_networking(
    settings: ConnectionSettings,
    client: Optional[httpx.Client] = None,
) -> bool:
    """Point settings.ha_ip at a reachable host when the configured one is not.

    Candidates, in order: default gateway, the common Docker host addresses,
    then the resolved address of host.docker.internal. Never fatal.

    Returns:
        True when the configured host works (or was replaced by one that does)
    """
    _log.info("Checking Docker networking")

    if settings.auth_mode is AuthMode.SUPERVISOR:
        _log.info("Supervisor token in use, Docker networking handled by supervisor")
        return True

    timeout = settings.reachability_timeout
    current = settings.ha_ip

    if check_basic_connectivity(settings.direct_api_url, timeout, client):
        _log.info("Configured host reachable", host=current)
        return True

    _log.warning(
        "Configured host unreachable, possible Tailscale or Docker networking issue",
        host=current,
    )

    def offer(label: str, lookup):
        def fn() -> Optional[str]:
            host = lookup()
            if not host or host == current:
                return None
            _log.info("Trying Docker host candidate", source=label, host=host)
            return host
        return {"name": label, "fn": fn}

    steps = [offer("gateway", default_gateway)]
    steps += [offer("common", lambda h=h: h) for h in DOCKER_FALLBACK_HOSTS]
    steps.append(offer("dns", lambda: resolve_host(DOCKER_HOST_NAME)))
    for step in steps:
        step["test"] = lambda host: check_basic_connectivity(
            _candidate_url(settings, host), timeout, client
        )

    found = FallbackChain("docker_host", steps).call()
    if found is None:
        _log.warning("No working Docker host IP found, set HA_IP manually")
        return False

    _log.info("Working Docker host found", host=found)
    settings.set_host(found)
    return True
