"""Tests for ensure_connectivity fallback search."""

from unittest.mock import patch

from sunsync_bridge.core.errors import ErrorCode
from sunsync_bridge.core.hass_ops import (
    AuthMode,
    LEGACY_REGISTRY_ENDPOINT,
    MODERN_REGISTRY_ENDPOINT,
    ensure_connectivity,
)

SUP = "http://supervisor/core/api"
DIRECT = "http://ha.local:8123/api"


class TestLongLivedTokenMode:

    def test_direct_probe_success_negotiates_version(self, fake_ha, client, lt_settings):
        fake_ha.add("HEAD", DIRECT, 200)
        fake_ha.add("GET", f"{DIRECT}/", json={"message": "API running.", "version": "2023.5.1"})

        result = ensure_connectivity(lt_settings, client)

        assert result.success
        assert result.data == {"base_url": DIRECT}
        assert lt_settings.api_version == "2023.5.1"
        assert lt_settings.registry_endpoint == MODERN_REGISTRY_ENDPOINT
        assert fake_ha.calls("GET") == [("GET", f"{DIRECT}/"), ("GET", f"{DIRECT}/")]

    def test_runs_docker_detection_first(self, client, lt_settings):
        with patch(
            "sunsync_bridge.core.hass_ops.connectivity.detect_docker_networking",
            return_value=True,
        ) as detect:
            ensure_connectivity(lt_settings, client)

        detect.assert_called_once_with(lt_settings, client)

    def test_failure_does_not_try_supervisor_endpoints(self, fake_ha, client, lt_settings):
        fake_ha.add("HEAD", DIRECT, 200)
        fake_ha.add("GET", f"{DIRECT}/", 401)

        result = ensure_connectivity(lt_settings, client)

        assert not result.success
        assert result.code is ErrorCode.CONNECTIVITY
        assert not any("supervisor" in url for _, url in fake_ha.calls())
        assert lt_settings.override_url is None


class TestSupervisorMode:

    def test_probes_config_endpoint(self, fake_ha, client, sup_settings):
        fake_ha.add("GET", f"{SUP}/config", json={"version": "2022.12.0"})
        fake_ha.add("GET", f"{SUP}/", json={"version": "2022.12.0"})

        result = ensure_connectivity(sup_settings, client)

        assert result.success
        assert fake_ha.calls()[0] == ("GET", f"{SUP}/config")
        assert fake_ha.requests[0].headers["Authorization"] == "Bearer sup-token"
        assert sup_settings.registry_endpoint == LEGACY_REGISTRY_ENDPOINT
        assert sup_settings.override_url is None

    def test_skips_docker_detection(self, fake_ha, client, sup_settings):
        fake_ha.add("GET", f"{SUP}/config", 200)
        with patch(
            "sunsync_bridge.core.hass_ops.connectivity.detect_docker_networking"
        ) as detect:
            ensure_connectivity(sup_settings, client)

        detect.assert_not_called()

    def test_only_third_fallback_works(self, fake_ha, client, sup_settings):
        fake_ha.add("GET", f"{SUP}/config", 502)
        fake_ha.add("GET", f"{SUP}/states", 404)
        fake_ha.add("GET", SUP, 200, json={"message": "API running."})

        result = ensure_connectivity(sup_settings, client)

        assert result.success
        assert sup_settings.override_url == "http://supervisor/core"
        assert fake_ha.calls()[:4] == [
            ("GET", f"{SUP}/config"),
            ("GET", f"{SUP}/states"),
            ("GET", f"{SUP}/config"),
            ("GET", SUP),
        ]
        # version probe against the new base
        assert fake_ha.calls()[4] == ("GET", "http://supervisor/core/")
        assert sup_settings.auth_mode is AuthMode.SUPERVISOR

    def test_first_fallback_stops_search(self, fake_ha, client, sup_settings):
        fake_ha.add("GET", f"{SUP}/config", 502)
        fake_ha.add("GET", f"{SUP}/states", json=[])

        result = ensure_connectivity(sup_settings, client)

        assert result.success
        assert sup_settings.override_url == SUP
        assert ("GET", SUP) not in fake_ha.calls()

    def test_direct_host_fallback_drops_supervisor(self, fake_ha, client, sup_settings):
        sup_settings.ha_ip = "ha.local"
        fake_ha.add("GET", f"{DIRECT}/", json={"version": "2024.1.0"})

        result = ensure_connectivity(sup_settings, client)

        assert result.success
        assert sup_settings.auth_mode is AuthMode.LONG_LIVED_TOKEN
        assert sup_settings.override_url == DIRECT
        assert sup_settings.registry_endpoint == MODERN_REGISTRY_ENDPOINT

        direct_probe = [r for r in fake_ha.requests if str(r.url) == f"{DIRECT}/"][0]
        assert direct_probe.headers["Authorization"] == "Bearer sup-token"
        # version probe after the switch uses the long-lived token
        assert fake_ha.requests[-1].headers["Authorization"] == "Bearer llt-abcdef123456"

    def test_direct_host_skipped_without_ip(self, fake_ha, client, sup_settings):
        result = ensure_connectivity(sup_settings, client)

        assert not result.success
        assert result.code is ErrorCode.CONNECTIVITY
        assert len(fake_ha.calls()) == 4

    def test_all_strategies_exhausted(self, fake_ha, client, sup_settings):
        sup_settings.ha_ip = "ha.local"

        result = ensure_connectivity(sup_settings, client)

        assert not result.success
        assert result.code is ErrorCode.CONNECTIVITY
        assert result.error.retryable
        assert sup_settings.override_url is None
        assert sup_settings.supervisor_token == "sup-token"
        assert fake_ha.calls()[-1] == ("GET", f"{DIRECT}/")

    def test_direct_host_skipped_without_configured_port(self, fake_ha, client, sup_settings):
        sup_settings.ha_ip = "ha.local"
        sup_settings.port_configured = False
        fake_ha.add("GET", f"{DIRECT}/", json={"version": "2024.1.0"})

        result = ensure_connectivity(sup_settings, client)

        assert not result.success
        assert ("GET", f"{DIRECT}/") not in fake_ha.calls()
        assert sup_settings.auth_mode is AuthMode.SUPERVISOR
