"""Tests for sensor key metadata and entity descriptors."""

import pytest

from sunsync_bridge.core.hass_ops import build_entity, derive_metadata


class TestDeriveMetadata:

    @pytest.mark.parametrize("key,unit,device_class", [
        ("pv1_power", "W", "power"),
        ("grid_power", "W", "power"),
        ("day_energy", "kWh", "energy"),
        ("battery_charge", "kWh", "energy"),
        ("battery_discharge", "kWh", "energy"),
        ("battery_voltage", "V", "voltage"),
        ("grid_current", "A", "current"),
        ("grid_frequency", "Hz", "frequency"),
        ("radiator_temperature", "°C", "temperature"),
        ("battery_temp", "°C", "temperature"),
        ("battery_soc", "%", "battery"),
    ])
    def test_table_suffixes(self, key, unit, device_class):
        assert derive_metadata(key) == (unit, device_class)

    @pytest.mark.parametrize("key", [
        "inverter_status",
        "power_factor",
        "soc",
        "battery_soc_target",
        "",
    ])
    def test_no_match_returns_none(self, key):
        assert derive_metadata(key) == (None, None)

    def test_first_listed_suffix_wins(self):
        """_discharge also ends with _charge; both map to energy."""
        assert derive_metadata("total_discharge") == ("kWh", "energy")


class TestBuildEntity:

    def test_entity_id_and_name(self):
        entity = build_entity("2211229948", "battery_soc", "87")

        assert entity.entity_id == "sensor.sunsync_2211229948_battery_soc"
        assert entity.friendly_name == "SunSync 2211229948 battery_soc"
        assert entity.value == "87"

    def test_payload_with_metadata(self):
        payload = build_entity("42", "pv1_power", "1520").to_payload()

        assert payload == {
            "state": "1520",
            "attributes": {
                "friendly_name": "SunSync 42 pv1_power",
                "unit_of_measurement": "W",
                "device_class": "power",
            },
        }

    def test_payload_omits_empty_metadata(self):
        payload = build_entity("42", "inverter_status", "normal").to_payload()

        assert payload["attributes"] == {"friendly_name": "SunSync 42 inverter_status"}

    def test_non_string_value_is_stringified(self):
        assert build_entity("42", "pv1_power", 1520).value == "1520"

    def test_same_input_same_payload(self):
        a = build_entity("42", "grid_voltage", "230.1").to_payload()
        b = build_entity("42", "grid_voltage", "230.1").to_payload()
        assert a == b
