"""Home Assistant entity bridge for SunSync inverter readings.

- config.py: connection settings, constants, result type
- auth.py: credential and base URL resolution
- api.py: request sending and response classification
- docker_net.py: Docker host discovery for long-lived token mode
- connectivity.py: reachability search across fallback strategies
- version.py: API version detection, registry endpoint selection
- metadata.py: unit/device class lookup, entity descriptors
- entities.py: state create/update for a batch of readings
- verify.py: post-sync verification and registry registration
- diagnostics.py: read-only troubleshooting dump
"""

from .config import (
    AuthMode,
    ConnectionSettings,
    HASSResult,
    LEGACY_REGISTRY_ENDPOINT,
    MODERN_REGISTRY_ENDPOINT,
)

from .auth import (
    auth_headers,
    resolve_auth_header,
    resolve_base_url,
)

from .api import (
    hass_request,
    payload_signals_error,
)

from .docker_net import (
    check_basic_connectivity,
    detect_docker_networking,
)

from .connectivity import ensure_connectivity

from .version import (
    extract_version,
    negotiate_version,
    select_registry_endpoint,
)

from .metadata import (
    EntityDescriptor,
    build_entity,
    derive_metadata,
)

from .entities import (
    push_entity,
    sync_entities,
)

from .verify import (
    count_entities,
    register_entity,
    verify,
)

from .diagnostics import diagnose_ha_setup

__all__ = [
    # Settings and types
    "AuthMode",
    "ConnectionSettings",
    "HASSResult",
    "LEGACY_REGISTRY_ENDPOINT",
    "MODERN_REGISTRY_ENDPOINT",
    # Resolution
    "auth_headers",
    "resolve_auth_header",
    "resolve_base_url",
    # Transport
    "hass_request",
    "payload_signals_error",
    # Connectivity
    "check_basic_connectivity",
    "detect_docker_networking",
    "ensure_connectivity",
    # Version
    "extract_version",
    "negotiate_version",
    "select_registry_endpoint",
    # Entities
    "EntityDescriptor",
    "build_entity",
    "derive_metadata",
    "push_entity",
    "sync_entities",
    # Verification
    "count_entities",
    "register_entity",
    "verify",
    # Diagnostics
    "diagnose_ha_setup",
]
