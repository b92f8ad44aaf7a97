"""Low-level Home Assistant API communication."""

from typing import Optional, Dict, Any
import httpx
from sunsync_bridge.core.errors import ErrorCode
from sunsync_bridge.core.logging import get_logger
from sunsync_bridge.core.utils.http_pool import get_client
from .auth import auth_headers
from .config import ConnectionSettings, HASSResult, SUCCESS_STATUSES

_log = get_logger("hass.api")

# Substring match on the raw body, not a parsed field lookup
ERROR_MARKER = '"error"'


def hass_request(
    settings: ConnectionSettings,
    method: str,
    url: str,
    payload: Optional[Dict[str, Any]] = None,
    client: Optional[httpx.Client] = None,
    timeout: Optional[float] = None,
) -> HASSResult:
    """Send one request to Home Assistant and classify the response.

    No retries: fallback sequences are the caller's job.

    Args:
        settings: Connection settings (credential source)
        method: HTTP method
        url: Absolute URL
        payload: Optional JSON body
        client: httpx client (defaults to the pooled one)
        timeout: Per-request timeout (defaults to settings.request_timeout)

    Returns:
        HASSResult; transport failures and non-2xx statuses carry ErrorCode.TRANSPORT
    """
    client = client or get_client(timeout=settings.request_timeout)
    method = method.upper()
    kwargs: Dict[str, Any] = {"headers": auth_headers(settings)}
    if payload is not None:
        kwargs["json"] = payload
    kwargs["timeout"] = timeout if timeout is not None else settings.request_timeout

    _log.debug("HASS req", method=method, url=url)

    try:
        resp = client.request(method, url, **kwargs)
    except httpx.TimeoutException:
        _log.warning("HASS fail", method=method, url=url, err="timeout")
        return HASSResult.fail(
            ErrorCode.TRANSPORT,
            "Connection timeout - Home Assistant may be unreachable",
            url=url,
        )
    except (httpx.RequestError, httpx.InvalidURL) as e:
        _log.warning("HASS fail", method=method, url=url, err=str(e)[:100])
        return HASSResult.fail(ErrorCode.TRANSPORT, f"Connection error: {e}", url=url)

    return _process_response(resp, url)


def _process_response(resp: httpx.Response, url: str = "") -> HASSResult:
    """Process HTTP response from Home Assistant API.

    Args:
        resp: httpx Response object
        url: Request URL (for logging)

    Returns:
        HASSResult with raw body and parsed JSON (when the body is JSON)
    """
    _log.debug("HASS res", url=url, status=resp.status_code)
    body = resp.text
    if resp.status_code in SUCCESS_STATUSES:
        try:
            data = resp.json()
        except ValueError:
            data = None
        return HASSResult.ok(data=data, status=resp.status_code, body=body)
    if resp.status_code == 401:
        message = "Authentication failed - check the access token"
    elif resp.status_code == 404:
        message = "Not found"
    else:
        message = f"HASS API error {resp.status_code}: {body[:200]}"
    return HASSResult.fail(
        ErrorCode.TRANSPORT,
        message,
        status=resp.status_code,
        body=body,
        url=url,
    )


def payload_signals_error(body: str) -> bool:
    """True when a 2xx body still reports an error."""
    return ERROR_MARKER in body


def probe(
    settings: ConnectionSettings,
    url: str,
    client: Optional[httpx.Client] = None,
) -> bool:
    """Authenticated GET; True on 200/201."""
    result = hass_request(settings, "GET", url, client=client)
    _log.debug("Probe", url=url, status=result.status, ok=result.success)
    return result.success
