"""
Pytest configuration and shared fixtures for the WS-TCP bridge test suite.

This module provides common fixtures and configuration for all tests.
"""

import pytest
import pytest_asyncio

from ws_tcp_bridge.config import BridgeConfig

from tests.helpers import Backend, FakeWebSocket


@pytest_asyncio.fixture
async def backend():
    """Start a TCP backend on an ephemeral local port."""
    server = Backend()
    await server.start()
    yield server
    await server.stop()


@pytest.fixture
def bridge_config(backend, tmp_path):
    """Create a configuration pointing at the test backend."""
    return BridgeConfig(
        backend_host="127.0.0.1",
        backend_port=backend.port,
        host="127.0.0.1",
        static_dir=str(tmp_path / "public"),
        ws_ping_interval=0,
        log_level="DEBUG",
    )


@pytest_asyncio.fixture
async def fake_websocket():
    """Create an accepted in-memory WebSocket."""
    return FakeWebSocket()


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
