"""Tests for API version negotiation."""

import pytest

from sunsync_bridge.core.hass_ops import (
    LEGACY_REGISTRY_ENDPOINT,
    MODERN_REGISTRY_ENDPOINT,
    extract_version,
    negotiate_version,
    select_registry_endpoint,
)

ROOT = "http://ha.local:8123/api/"


class TestSelectRegistryEndpoint:

    @pytest.mark.parametrize("version", ["2023.5.1", "2024.1.0", "2029.12.3"])
    def test_modern(self, version):
        assert select_registry_endpoint(version) == MODERN_REGISTRY_ENDPOINT

    @pytest.mark.parametrize("version", ["2022.12.0", "2021.1.5", "0.118.5", "2030.1.0", "v2023.5"])
    def test_legacy(self, version):
        assert select_registry_endpoint(version) == LEGACY_REGISTRY_ENDPOINT


class TestExtractVersion:

    def test_json_body(self):
        assert extract_version('{"message": "API running.", "version": "2023.5.1"}') == "2023.5.1"

    def test_pattern_fallback_on_non_json(self):
        assert extract_version('garbage "version":  "2022.12.0" trailing') == "2022.12.0"

    def test_nested_version_found_by_pattern(self):
        assert extract_version('{"core": {"version": "2024.2.0"}}') == "2024.2.0"

    @pytest.mark.parametrize("body", ["", '{"message": "API running."}', '{"version": ""}', "version"])
    def test_missing(self, body):
        assert extract_version(body) is None


class TestNegotiateVersion:

    def test_modern_version_selects_modern_endpoint(self, fake_ha, client, lt_settings):
        fake_ha.add("GET", ROOT, json={"version": "2023.5.1"})

        assert negotiate_version(lt_settings, client) == "2023.5.1"
        assert lt_settings.api_version == "2023.5.1"
        assert lt_settings.registry_endpoint == MODERN_REGISTRY_ENDPOINT

    def test_old_version_selects_legacy_endpoint(self, fake_ha, client, lt_settings):
        lt_settings.set_registry_endpoint(MODERN_REGISTRY_ENDPOINT)
        fake_ha.add("GET", ROOT, json={"version": "2022.12.0"})

        negotiate_version(lt_settings, client)

        assert lt_settings.registry_endpoint == LEGACY_REGISTRY_ENDPOINT

    def test_missing_version_leaves_endpoint(self, fake_ha, client, lt_settings):
        lt_settings.set_registry_endpoint(MODERN_REGISTRY_ENDPOINT)
        fake_ha.add("GET", ROOT, json={"message": "API running."})

        assert negotiate_version(lt_settings, client) is None
        assert lt_settings.api_version is None
        assert lt_settings.registry_endpoint == MODERN_REGISTRY_ENDPOINT

    def test_http_failure_is_not_fatal(self, fake_ha, client, lt_settings):
        fake_ha.add("GET", ROOT, 500, text="boom")

        assert negotiate_version(lt_settings, client) is None
        assert lt_settings.registry_endpoint == LEGACY_REGISTRY_ENDPOINT

    def test_unreachable_is_not_fatal(self, client, lt_settings):
        assert negotiate_version(lt_settings, client) is None

    def test_uses_override_url(self, fake_ha, client, lt_settings):
        lt_settings.use_override("http://supervisor/core/api")
        fake_ha.add("GET", "http://supervisor/core/api/", json={"version": "2023.1.0"})

        assert negotiate_version(lt_settings, client) == "2023.1.0"
