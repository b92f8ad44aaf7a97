"""Connection settings, constants, and result type for Home Assistant operations."""

from typing import Optional, Any
from dataclasses import dataclass
from enum import Enum
from sunsync_bridge.core.errors import ErrorCode, HassError
from sunsync_bridge.core.logging import get_logger

_log = get_logger("hass.config")

SUCCESS_STATUSES = (200, 201)

MODERN_REGISTRY_ENDPOINT = "config/entity_registry/entity"
LEGACY_REGISTRY_ENDPOINT = "config/entity_registry/registry"

SUPERVISOR_BASE = "http://supervisor"
SUPERVISOR_FALLBACK_ENDPOINTS = (
    f"{SUPERVISOR_BASE}/core/api/states",
    f"{SUPERVISOR_BASE}/core/api/config",
    f"{SUPERVISOR_BASE}/core/api",
)

DOCKER_FALLBACK_HOSTS = ("172.17.0.1", "192.168.1.1", "host.docker.internal")
DOCKER_HOST_NAME = "host.docker.internal"

ENTITY_PREFIX = "sensor.sunsync"
SENTINEL_KEY = "battery_soc"


class AuthMode(Enum):
    """Which credential authenticates API calls."""

    SUPERVISOR = "supervisor"
    LONG_LIVED_TOKEN = "long_lived_token"


@dataclass
class ConnectionSettings:
    """Process-wide connection state, owned by the caller and passed by reference.

    Resolver, negotiator and registrar rewrite it through the methods below
    when they discover a better path.
    """

    supervisor_token: Optional[str] = None
    ha_token: Optional[str] = None
    ha_ip: str = ""
    ha_port: int = 8123
    # False when HA_PORT was absent and ha_port is only the default
    port_configured: bool = True
    scheme: str = "http"
    override_url: Optional[str] = None
    api_version: Optional[str] = None
    registry_endpoint: str = LEGACY_REGISTRY_ENDPOINT
    verbose: bool = False
    request_timeout: float = 10.0
    reachability_timeout: float = 3.0

    @property
    def auth_mode(self) -> AuthMode:
        return AuthMode.SUPERVISOR if self.supervisor_token else AuthMode.LONG_LIVED_TOKEN

    @property
    def active_token(self) -> Optional[str]:
        if self.auth_mode is AuthMode.SUPERVISOR:
            return self.supervisor_token
        return self.ha_token

    @property
    def direct_root(self) -> str:
        """`<scheme>://<host>:<port>` for the configured host."""
        return f"{self.scheme}://{self.ha_ip}:{self.ha_port}"

    @property
    def direct_api_url(self) -> str:
        return f"{self.direct_root}/api"

    def use_override(self, url: str) -> None:
        _log.info("Override URL set", url=url)
        self.override_url = url

    def drop_supervisor(self) -> None:
        """Switch to long-lived token mode for the rest of the process."""
        _log.info("Supervisor token dropped", mode=AuthMode.LONG_LIVED_TOKEN.value)
        self.supervisor_token = None

    def set_host(self, host: str) -> None:
        _log.info("HA host changed", old=self.ha_ip, new=host)
        self.ha_ip = host

    def set_api_version(self, version: str) -> None:
        self.api_version = version

    def set_registry_endpoint(self, endpoint: str) -> None:
        self.registry_endpoint = endpoint


@dataclass
class HASSResult:
    """Result object for Home Assistant API operations."""

    success: bool
    message: str
    data: Optional[Any] = None
    error: Optional[HassError] = None
    status: int = 0
    body: str = ""

    @property
    def code(self) -> Optional[ErrorCode]:
        return self.error.code if self.error else None

    @classmethod
    def ok(
        cls,
        message: str = "OK",
        data: Any = None,
        status: int = 0,
        body: str = "",
    ) -> "HASSResult":
        return cls(success=True, message=message, data=data, status=status, body=body)

    @classmethod
    def fail(
        cls,
        code: ErrorCode,
        message: str,
        data: Any = None,
        status: int = 0,
        body: str = "",
        **details: Any,
    ) -> "HASSResult":
        return cls(
            success=False,
            message="",
            data=data,
            error=HassError(code=code, message=message, details=details or None),
            status=status,
            body=body,
        )
