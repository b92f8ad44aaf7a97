"""Pytest fixtures for Home Assistant module tests."""

from typing import Callable, Dict, List, Tuple, Union

import httpx
import pytest

from sunsync_bridge.core.hass_ops import ConnectionSettings


Route = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


class FakeHomeAssistant:
    """Route table behind an httpx.MockTransport.

    Unrouted URLs raise ConnectError, like a host that does not answer.
    """

    def __init__(self):
        self.routes: Dict[Tuple[str, str], List[Route]] = {}
        self.requests: List[httpx.Request] = []

    def add(self, method: str, url: str, status: int = 200, json=None, text: str = None) -> None:
        if json is not None:
            response = httpx.Response(status, json=json)
        else:
            response = httpx.Response(status, text=text or "")
        self.routes.setdefault((method.upper(), url), []).append(response)

    def add_handler(self, method: str, url: str, fn: Callable[[httpx.Request], httpx.Response]) -> None:
        self.routes.setdefault((method.upper(), url), []).append(fn)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.routes.get((request.method, str(request.url)))
        if not queue:
            raise httpx.ConnectError("connection refused", request=request)
        # Last registered response sticks; earlier ones are consumed in order
        route = queue.pop(0) if len(queue) > 1 else queue[0]
        return route(request) if callable(route) else route

    def calls(self, method: str = None) -> List[Tuple[str, str]]:
        return [
            (r.method, str(r.url))
            for r in self.requests
            if method is None or r.method == method
        ]


@pytest.fixture
def fake_ha() -> FakeHomeAssistant:
    return FakeHomeAssistant()


@pytest.fixture
def client(fake_ha):
    with httpx.Client(transport=httpx.MockTransport(fake_ha.handler)) as c:
        yield c


@pytest.fixture
def lt_settings() -> ConnectionSettings:
    """Long-lived token mode against ha.local:8123."""
    return ConnectionSettings(
        ha_token="llt-abcdef123456",
        ha_ip="ha.local",
        ha_port=8123,
        scheme="http",
    )


@pytest.fixture
def sup_settings() -> ConnectionSettings:
    """Supervisor mode, no override."""
    return ConnectionSettings(
        supervisor_token="sup-token",
        ha_token="llt-abcdef123456",
    )


@pytest.fixture
def sample_readings() -> dict:
    return {
        "battery_soc": "87",
        "pv1_power": "1520",
        "inverter_status": "normal",
    }
