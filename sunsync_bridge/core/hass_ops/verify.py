"""Post-sync verification and entity registry registration."""

from typing import Optional, Tuple
import httpx
from sunsync_bridge.core.errors import ErrorCode
from sunsync_bridge.core.logging import get_logger, logged
from .api import hass_request
from .auth import resolve_base_url
from .config import (
    ConnectionSettings,
    HASSResult,
    LEGACY_REGISTRY_ENDPOINT,
    MODERN_REGISTRY_ENDPOINT,
    SENTINEL_KEY,
)
from .metadata import entity_id_for

_log = get_logger("hass.verify")

OWN_ENTITY_MARKER = "sunsync"


def count_entities(
    settings: ConnectionSettings,
    client: Optional[httpx.Client] = None,
) -> Tuple[int, int]:
    """Approximate (total, sunsync) entity counts from one /states listing.

    Counts are substring occurrences in the raw body; informational only.
    """
    result = hass_request(settings, "GET", f"{resolve_base_url(settings)}/states", client=client)
    body = result.body if result.success else ""
    return body.count('"entity_id"'), body.count(OWN_ENTITY_MARKER)


def register_entity(
    settings: ConnectionSettings,
    device_id: str,
    entity_id: str,
    client: Optional[httpx.Client] = None,
) -> HASSResult:
    """Register an entity explicitly, falling back modern -> legacy endpoint once.

    A legacy endpoint that works is stored in settings for later calls.
    """
    base = resolve_base_url(settings)
    endpoint = settings.registry_endpoint
    payload = {
        "entity_id": entity_id,
        "name": f"SunSync {device_id} Battery SOC",
        "device_class": "battery",
    }

    _log.info("Registering entity in registry", ent=entity_id, url=f"{base}/{endpoint}")
    result = hass_request(settings, "POST", f"{base}/{endpoint}", payload, client=client)
    if result.success:
        _log.info("Registered entity in registry", ent=entity_id)
        return result

    _log.warning(
        "Could not register entity in registry",
        ent=entity_id,
        status=result.status,
        body=result.body[:200],
    )
    if endpoint != MODERN_REGISTRY_ENDPOINT:
        return result

    _log.info("Trying alternative entity registry endpoint", endpoint=LEGACY_REGISTRY_ENDPOINT)
    retry = hass_request(
        settings, "POST", f"{base}/{LEGACY_REGISTRY_ENDPOINT}", payload, client=client
    )
    if retry.success:
        _log.info("Registered entity using alternative endpoint", ent=entity_id)
        settings.set_registry_endpoint(LEGACY_REGISTRY_ENDPOINT)
    else:
        _log.warning("Alternative registry endpoint failed", ent=entity_id, status=retry.status)
    return retry


@logged()
def verify(
    settings: ConnectionSettings,
    device_id: str,
    client: Optional[httpx.Client] = None,
) -> HASSResult:
    """Check that the sentinel entity of a device is visible.

    On failure, log diagnostics and try registering the sentinel. The
    result stays a failure whatever the registration outcome.
    """
    sentinel = entity_id_for(device_id, SENTINEL_KEY)
    _log.info("Verifying entity creation", ent=sentinel)

    result = hass_request(
        settings, "GET", f"{resolve_base_url(settings)}/states/{sentinel}", client=client
    )
    if result.success:
        _log.info("Entity verification successful", ent=sentinel)
        return HASSResult.ok(message=f"{sentinel} present", data={"entity_id": sentinel})

    _log.error("Verification failed, sample entity not found", ent=sentinel, status=result.status)
    _log.error("Possible issues: token permissions, entity format rejected, network path")

    total, own = count_entities(settings, client)
    _log.info("Entities visible in Home Assistant", total=total, sunsync=own)
    if total == 0:
        _log.info("No entities visible, the token likely lacks permissions")

    registration = register_entity(settings, device_id, sentinel, client=client)

    return HASSResult.fail(
        ErrorCode.VERIFICATION,
        f"Sentinel entity {sentinel} not found",
        data={"total": total, "sunsync": own, "registered": registration.success},
        status=result.status,
        entity_id=sentinel,
    )
