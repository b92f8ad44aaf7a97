from typing import Optional, Dict
import httpx
from sunsync_bridge.core.logging import get_logger

_log = get_logger("core.http_pool")

POOL_LIMITS = httpx.Limits(
    max_connections=10,
    max_keepalive_connections=5,
)

CONNECT_TIMEOUT = 5.0

_clients: Dict[str, httpx.Client] = {}


def get_client(
    service: str = "hass",
    timeout: Optional[float] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> httpx.Client:
    """Return the shared client for `service`, creating it on first use.

    Requests pass absolute URLs, so the client carries no base_url: the
    resolved API base can change between calls. Redirects are not followed;
    a 3xx comes back as-is.
    """
    if service not in _clients:
        from sunsync_bridge.config import HASS_TIMEOUT
        service_timeout = timeout or HASS_TIMEOUT
        _clients[service] = httpx.Client(
            limits=POOL_LIMITS,
            timeout=httpx.Timeout(service_timeout, connect=min(CONNECT_TIMEOUT, service_timeout)),
            follow_redirects=False,
            transport=transport,
        )
        _log.debug("Client created", service=service, timeout=service_timeout)
    return _clients[service]


def close_all() -> int:

    cnt = len(_clients)
    for service, client in _clients.items():
        try:
            client.close()
            _log.debug("Client closed", service=service)
        except Exception as e:
            _log.warning("Client close error", service=service, error=str(e))
    _clients.clear()
    return cnt
