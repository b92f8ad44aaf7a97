"""Create/update SunSync sensor states in Home Assistant."""

from typing import Mapping, Optional
import httpx
from sunsync_bridge.core.errors import ErrorCode
from sunsync_bridge.core.logging import get_logger, logged
from .api import hass_request, payload_signals_error
from .auth import resolve_base_url
from .config import ConnectionSettings, HASSResult
from .metadata import EntityDescriptor, build_entity
from .verify import verify

_log = get_logger("hass.entities")


def push_entity(
    settings: ConnectionSettings,
    entity: EntityDescriptor,
    client: Optional[httpx.Client] = None,
) -> HASSResult:
    """POST one state record.

    Returns:
        Success on 200/201 without an error marker in the body;
        ErrorCode.TRANSPORT for non-2xx/no response, ErrorCode.API otherwise
    """
    url = f"{resolve_base_url(settings)}/states/{entity.entity_id}"
    payload = entity.to_payload()

    if settings.verbose:
        _log.debug("Sending state", url=url, payload=payload)

    result = hass_request(settings, "POST", url, payload, client=client)

    if not result.success:
        _log.error(
            "API call failed for entity",
            ent=entity.entity_id,
            status=result.status,
            url=url,
            body=result.body[:200],
        )
        return result

    if payload_signals_error(result.body):
        _log.error("API returned error for entity", ent=entity.entity_id, body=result.body[:200])
        return HASSResult.fail(
            ErrorCode.API,
            f"API returned error for {entity.entity_id}",
            status=result.status,
            body=result.body,
            entity_id=entity.entity_id,
        )

    return result


@logged()
def sync_entities(
    settings: ConnectionSettings,
    device_id: str,
    readings: Mapping[str, object],
    client: Optional[httpx.Client] = None,
) -> HASSResult:
    """Push every reading for a device, then verify the batch once.

    A failed reading is logged and skipped; it never stops the rest.

    Args:
        settings: Resolved connection settings
        device_id: Inverter serial
        readings: Sensor key -> value
        client: httpx client (defaults to the pooled one)

    Returns:
        Success when every reading was accepted, else ErrorCode.PARTIAL_FAILURE.
        data carries {"total": n, "failed": m}.
    """
    _log.info("Updating Home Assistant entities", dev=device_id, cnt=len(readings))
    _log.info("Using API base URL", url=resolve_base_url(settings))

    failed = 0
    for key, value in readings.items():
        entity = build_entity(device_id, key, value)
        result = push_entity(settings, entity, client=client)
        if not result.success:
            failed += 1
            _log.error("Failed to update entity", ent=entity.entity_id, value=entity.value)
        elif settings.verbose:
            _log.debug("Updated entity", ent=entity.entity_id, value=entity.value)

    verify(settings, device_id, client=client)

    summary = {"total": len(readings), "failed": failed}
    if failed:
        _log.warning("Entity update finished with failures", dev=device_id, **summary)
        return HASSResult.fail(
            ErrorCode.PARTIAL_FAILURE,
            f"{failed} of {len(readings)} entity updates failed",
            data=summary,
            device_id=device_id,
        )

    _log.info("Entity update complete", dev=device_id, **summary)
    return HASSResult.ok(message=f"Updated {len(readings)} entities", data=summary)
