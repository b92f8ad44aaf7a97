"""Root conftest: resets process-wide state after every test."""

import pytest

from sunsync_bridge.core.utils import http_pool


@pytest.fixture(autouse=True)
def _reset_global_state():
    """Close pooled httpx clients after each test."""
    yield
    http_pool.close_all()
