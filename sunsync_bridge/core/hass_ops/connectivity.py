"""Connectivity resolution: find a working API base URL and credential."""

from typing import Optional, Tuple
import httpx
from sunsync_bridge.core.errors import ErrorCode
from sunsync_bridge.core.logging import get_logger, logged
from sunsync_bridge.core.resilience.fallback_chain import FallbackChain
from .api import hass_request, probe
from .auth import resolve_auth_header, resolve_base_url
from .config import AuthMode, ConnectionSettings, HASSResult, SUPERVISOR_FALLBACK_ENDPOINTS
from .docker_net import detect_docker_networking
from .version import negotiate_version

_log = get_logger("hass.connectivity")

__all__ = [
    "ensure_connectivity",
    "resolve_auth_header",
    "resolve_base_url",
]


def _test_endpoint(settings: ConnectionSettings) -> str:
    # /config answers reliably through the supervisor proxy; /states can be slow
    base = resolve_base_url(settings)
    if settings.auth_mode is AuthMode.SUPERVISOR:
        return f"{base}/config"
    return f"{base}/"


def _supervisor_fallback(
    settings: ConnectionSettings,
    client: Optional[httpx.Client],
) -> Optional[Tuple[str, str]]:
    """Try the alternative supervisor endpoints, then the direct host.

    Returns:
        ("supervisor", endpoint) or ("direct", url) for the first one that
        answers 200/201, else None
    """
    _log.info("Trying alternative supervisor API endpoints")

    def offer(kind: str, url: str):
        def fn() -> Tuple[str, str]:
            _log.info("Trying endpoint", url=url)
            return kind, url
        return {"name": url, "fn": fn, "test": lambda found: probe(settings, found[1], client)}

    steps = [offer("supervisor", endpoint) for endpoint in SUPERVISOR_FALLBACK_ENDPOINTS]
    if settings.ha_ip and settings.port_configured:
        steps.append(offer("direct", f"{settings.direct_api_url}/"))

    return FallbackChain("supervisor_endpoints", steps).call()


@logged()
def ensure_connectivity(
    settings: ConnectionSettings,
    client: Optional[httpx.Client] = None,
) -> HASSResult:
    """Make sure the API is reachable, rewriting settings to a working path.

    Order: configured base URL, then (supervisor mode only) the alternative
    supervisor endpoints and finally a direct connection to HA_IP:HA_PORT.
    Version negotiation runs once a path works.

    Args:
        settings: Connection settings; may be updated in place
        client: httpx client (defaults to the pooled one)

    Returns:
        HASSResult with data={"base_url": ...} on success, or an
        ErrorCode.CONNECTIVITY failure once every strategy is exhausted
    """
    _log.info("Testing connection to Home Assistant API")

    if settings.auth_mode is AuthMode.LONG_LIVED_TOKEN:
        detect_docker_networking(settings, client)

    _log.info("Using API URL", url=resolve_base_url(settings), mode=settings.auth_mode.value)

    first = hass_request(settings, "GET", _test_endpoint(settings), client=client)
    if first.success:
        _log.info("Connected to Home Assistant API")
        return _connected(settings, client)

    _log.error(
        "Failed to connect to Home Assistant API, verify configuration and connectivity",
        status=first.status,
        err=str(first.error) if first.error else None,
    )

    if settings.auth_mode is AuthMode.SUPERVISOR:
        found = _supervisor_fallback(settings, client)
        if found is not None:
            kind, url = found
            if kind == "direct":
                _log.info("Direct connection works, switching to long-lived token mode", url=url)
                settings.drop_supervisor()
                settings.use_override(settings.direct_api_url)
            else:
                _log.info("Alternative supervisor endpoint works", url=url)
                settings.use_override(url.rsplit("/", 1)[0])
            return _connected(settings, client)

    _log.error("All connectivity strategies exhausted")
    return HASSResult.fail(
        ErrorCode.CONNECTIVITY,
        "Home Assistant API unreachable",
        status=first.status,
        base_url=resolve_base_url(settings),
    )


def _connected(settings: ConnectionSettings, client: Optional[httpx.Client]) -> HASSResult:
    negotiate_version(settings, client)
    base_url = resolve_base_url(settings)
    return HASSResult.ok(message=f"Connected to {base_url}", data={"base_url": base_url})
