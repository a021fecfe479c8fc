"""
Pagecache — Test Configuration and Shared Fixtures

Provides pytest configuration and shared fixtures for unit and integration
tests. Native memcached clients are replaced by in-memory fakes that record
how they were called.
"""

import logging
import os
from collections.abc import Callable, Generator
from typing import Any

import pytest

from pagecache.config import BackendConfig, BackendType, reset_config
from pagecache.observability import Diagnostics

# Keep the developer's shell environment out of config tests
for _name in [name for name in os.environ if name.startswith("PAGECACHE_")]:
    del os.environ[_name]


class FakeServer:
    """Stand-in for a bmemcached Protocol object."""

    def __init__(self, server: str):
        self.server = server


class FakeBinaryClient:
    """In-memory stand-in for bmemcached.Client."""

    def __init__(self, servers: list[str], up: set[str] | None = None):
        self._servers = [FakeServer(server) for server in servers]
        self.up = set(servers) if up is None else up
        self.data: dict[str, Any] = {}
        self.calls: list[tuple[Any, ...]] = []
        self.set_servers_calls: list[list[str]] = []
        self.fail_set = False
        self.fail_delete = False
        self.disconnected = False

    @property
    def servers(self) -> Generator[FakeServer, None, None]:
        yield from self._servers

    def set_servers(self, servers: list[str]) -> None:
        self.set_servers_calls.append(list(servers))
        self._servers = [FakeServer(server) for server in servers]

    def get(self, key: str) -> Any:
        self.calls.append(("get", key))
        return self.data.get(key)

    def set(self, key: str, value: Any, time: int = 0) -> bool:
        self.calls.append(("set", key, time))
        if self.fail_set:
            return False
        self.data[key] = value
        return True

    def delete(self, key: str) -> bool:
        self.calls.append(("delete", key))
        if self.fail_delete:
            return False
        return self.data.pop(key, None) is not None

    def flush_all(self) -> bool:
        self.calls.append(("flush_all",))
        self.data.clear()
        return True

    def stats(self) -> dict[str, dict[str, str]]:
        self.calls.append(("stats",))
        return {server.server: {"uptime": "120" if server.server in self.up else "0"} for server in self._servers}

    def disconnect_all(self) -> None:
        self.disconnected = True


class FakeNode:
    """Stand-in for a pymemcache base Client bound to one server."""

    def __init__(self, address: tuple[str, int], reachable: bool = True):
        self.address = address
        self.reachable = reachable
        self.pings = 0
        self.closed = False

    def version(self) -> bytes:
        self.pings += 1
        if not self.reachable:
            raise ConnectionRefusedError(f"{self.address} refused connection")
        return b"1.6.21"

    def close(self) -> None:
        self.closed = True


class FakePool:
    """In-memory stand-in for pymemcache HashClient."""

    def __init__(self, addresses: list[tuple[str, int]]):
        self.addresses = addresses
        self.data: dict[str, Any] = {}
        self.calls: list[tuple[Any, ...]] = []
        self.closed = False

    def get(self, key: str) -> Any:
        self.calls.append(("get", key))
        return self.data.get(key)

    def set(self, key: str, value: Any, expire: int = 0, noreply: bool | None = None) -> bool:
        self.calls.append(("set", key, expire, noreply))
        self.data[key] = value
        return True

    def delete(self, key: str, noreply: bool | None = None) -> bool:
        self.calls.append(("delete", key, noreply))
        return self.data.pop(key, None) is not None

    def flush_all(self, noreply: bool | None = None) -> bool:
        self.calls.append(("flush_all", noreply))
        self.data.clear()
        return True

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def make_config() -> Callable[..., BackendConfig]:
    """Build a BackendConfig with logging on and debug diagnostics enabled."""

    def _make(**overrides: Any) -> BackendConfig:
        values: dict[str, Any] = {"debug_enabled": True, "logging_enabled": True}
        values.update(overrides)
        return BackendConfig(**values)

    return _make


@pytest.fixture
def diagnostics() -> Diagnostics:
    """Diagnostics emitting every level to the ``pagecache`` logger."""
    return Diagnostics(BackendType.LOCAL.value, logging_enabled=True, debug_enabled=True)


@pytest.fixture
def binary_clients() -> list[FakeBinaryClient]:
    """Every FakeBinaryClient created through ``binary_factory``."""
    return []


@pytest.fixture
def binary_factory(binary_clients: list[FakeBinaryClient]) -> Callable[[list[str]], FakeBinaryClient]:
    """Client factory for the binary driver, recording created clients."""

    def _factory(server_ids: list[str]) -> FakeBinaryClient:
        client = FakeBinaryClient(server_ids)
        binary_clients.append(client)
        return client

    return _factory


@pytest.fixture
def unreachable() -> set[str]:
    """Server ids whose FakeNode refuses connections."""
    return set()


@pytest.fixture
def text_nodes() -> dict[str, FakeNode]:
    """Every FakeNode created through ``node_factory``, keyed by server id."""
    return {}


@pytest.fixture
def node_factory(text_nodes: dict[str, FakeNode], unreachable: set[str]) -> Callable[[Any], FakeNode]:
    def _factory(server: Any) -> FakeNode:
        node = FakeNode(server.address, reachable=server.id not in unreachable)
        text_nodes[server.id] = node
        return node

    return _factory


@pytest.fixture
def text_pools() -> list[FakePool]:
    return []


@pytest.fixture
def pool_factory(text_pools: list[FakePool]) -> Callable[[list[Any]], FakePool]:
    def _factory(servers: list[Any]) -> FakePool:
        pool = FakePool([server.address for server in servers])
        text_pools.append(pool)
        return pool

    return _factory


@pytest.fixture(autouse=True)
def reset_registries() -> Generator[None, None, None]:
    """Reset process-wide state after each test to prevent leakage."""
    yield
    from pagecache.cache.connections import reset_connection_registry

    reset_connection_registry()
    reset_config()


@pytest.fixture
def debug_caplog(caplog: pytest.LogCaptureFixture) -> pytest.LogCaptureFixture:
    """caplog capturing every level of the ``pagecache`` logger."""
    caplog.set_level(logging.DEBUG, logger="pagecache")
    return caplog
