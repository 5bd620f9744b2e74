"""
Pytest configuration and fixtures for simulator tests.
"""

import builtins
from types import SimpleNamespace

import pytest

from mock_socket import (
    AsyncioScheduler,
    ConnectionRegistry,
    ManualScheduler,
    Server,
    reset_singletons,
)


@pytest.fixture(autouse=True)
def isolate_globals():
    """
    Keep every test independent of process-wide state.

    Restores the builtins WebSocket binding and drops the default
    registry/scheduler singletons after each test.
    """
    had_websocket = hasattr(builtins, "WebSocket")
    previous = getattr(builtins, "WebSocket", None)
    yield
    reset_singletons()
    if had_websocket:
        builtins.WebSocket = previous
    elif hasattr(builtins, "WebSocket"):
        del builtins.WebSocket


@pytest.fixture
def registry():
    """A fresh, private connection registry."""
    return ConnectionRegistry()


@pytest.fixture
def scheduler():
    """Synchronous scheduler drained explicitly with run_pending()."""
    return ManualScheduler()


@pytest.fixture
def async_scheduler():
    """Real asyncio deferral with a short delay."""
    return AsyncioScheduler(delay=0.001)


@pytest.fixture
def namespace():
    """Stand-in for the module whose WebSocket name gets patched."""
    return SimpleNamespace()


@pytest.fixture
def make_server(registry, namespace):
    """
    Factory for servers bound in the test registry.
    All servers created through it are stopped at teardown.
    """
    servers = []

    def _make(url="ws://localhost:8080", options=None, **kwargs):
        kwargs.setdefault("registry", registry)
        kwargs.setdefault("target", namespace)
        server = Server(url, options, **kwargs)
        servers.append(server)
        return server

    yield _make

    for server in servers:
        server.stop()
