"""Unit and device class lookup for SunSync sensor keys."""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple
from .config import ENTITY_PREFIX

# (suffixes, unit, device_class); checked in order, first match wins
SUFFIX_METADATA: Tuple[Tuple[Tuple[str, ...], str, str], ...] = (
    (("_power",), "W", "power"),
    (("_energy", "_charge", "_discharge"), "kWh", "energy"),
    (("_voltage",), "V", "voltage"),
    (("_current",), "A", "current"),
    (("_frequency",), "Hz", "frequency"),
    (("_temperature", "_temp"), "°C", "temperature"),
    (("_soc",), "%", "battery"),
)


def derive_metadata(key: str) -> Tuple[Optional[str], Optional[str]]:
    """(unit_of_measurement, device_class) for a sensor key, or (None, None)."""
    for suffixes, unit, device_class in SUFFIX_METADATA:
        if key.endswith(suffixes):
            return unit, device_class
    return None, None


def entity_id_for(device_id: str, key: str) -> str:
    return f"{ENTITY_PREFIX}_{device_id}_{key}"


@dataclass(frozen=True)
class EntityDescriptor:
    entity_id: str
    friendly_name: str
    value: str
    unit_of_measurement: Optional[str] = None
    device_class: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        """State POST body; optional attributes only when non-empty."""
        attributes: Dict[str, Any] = {"friendly_name": self.friendly_name}
        if self.unit_of_measurement:
            attributes["unit_of_measurement"] = self.unit_of_measurement
        if self.device_class:
            attributes["device_class"] = self.device_class
        return {"state": self.value, "attributes": attributes}


def build_entity(device_id: str, key: str, value: Any) -> EntityDescriptor:
    unit, device_class = derive_metadata(key)
    return EntityDescriptor(
        entity_id=entity_id_for(device_id, key),
        friendly_name=f"SunSync {device_id} {key}",
        value=str(value),
        unit_of_measurement=unit,
        device_class=device_class,
    )
