"""
Pagecache — Memcached Text Protocol Driver

Uses pymemcache. Every configured server gets its own node client that is
connected (pinged) synchronously at init; the ping result is that server's
status. Data operations go through a HashClient spread over all servers,
which stores text raw through PageSerde.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from ...config.schemas import BackendConfig, BackendType
from ...observability.diagnostics import Diagnostics
from ..connections import acquire_connection
from ..interface import BackendDriver, ServerHealth
from ..servers import ServerDescriptor

logger = logging.getLogger(__name__)

NodeFactory = Callable[[ServerDescriptor], Any]
PoolFactory = Callable[[list[ServerDescriptor]], Any]


class TextDriver(BackendDriver):
    """Driver for memcached over the text protocol."""

    backend_type = BackendType.TEXT
    probe_after_init = False

    def __init__(
        self,
        config: BackendConfig,
        servers: dict[str, ServerDescriptor],
        diagnostics: Diagnostics,
        node_factory: NodeFactory | None = None,
        pool_factory: PoolFactory | None = None,
    ):
        super().__init__(config, servers, diagnostics)
        self._node_factory = node_factory
        self._pool_factory = pool_factory
        self.nodes: dict[str, Any] = {}

    def _default_factories(self) -> tuple[NodeFactory, PoolFactory]:
        base = self._require_module("pymemcache.client.base", "pymemcache")
        hashing = self._require_module("pymemcache.client.hash", "pymemcache")
        from .serde import PageSerde

        timeout = self.config.socket_timeout

        def create_node(server: ServerDescriptor) -> Any:
            return base.Client(server.address, connect_timeout=timeout, timeout=timeout)

        def create_pool(servers: list[ServerDescriptor]) -> Any:
            return hashing.HashClient(
                [server.address for server in servers],
                connect_timeout=timeout,
                timeout=timeout,
                use_pooling=self.persistent,
                serde=PageSerde(),
            )

        return create_node, create_pool

    def _acquire(self, name: str, create: Callable[[], Any]) -> Any:
        if self.persistent:
            handle, _ = acquire_connection(f"text:{self.config.persistent_id}:{name}", create)
            return handle
        return create()

    def _ping(self, node: Any) -> bool:
        try:
            node.version()
            return True
        except Exception as e:
            logger.debug("Ping failed: %s", e)
            return False

    def _initialize(self, previously_alive: bool) -> None:
        if self._node_factory and self._pool_factory:
            create_node, create_pool = self._node_factory, self._pool_factory
        else:
            create_node, create_pool = self._default_factories()
        self._require_servers(previously_alive)

        for server_id, server in self.servers.items():
            if server_id not in self.nodes:
                self.nodes[server_id] = self._acquire(server_id, lambda s=server: create_node(s))
            connected = self._ping(self.nodes[server_id])
            self.status[server_id] = ServerHealth.UP if connected else ServerHealth.DOWN
            self.log(f"{server_id} added, persistent mode: {self.persistent}", logging.INFO)

        if self.connection is None:
            servers = list(self.servers.values())
            self.connection = self._acquire("pool", lambda: create_pool(servers))

    def status_probe(self) -> dict[str, ServerHealth]:
        self.log("checking server statuses", logging.INFO)

        for server_id, node in self.nodes.items():
            if self._ping(node):
                self.status[server_id] = ServerHealth.UP
                self.log(f"{server_id} server is up & running", logging.INFO)
            else:
                self.status[server_id] = ServerHealth.DOWN
                self.log(f"{server_id} server is down", logging.INFO)

        return self.status

    def get(self, key: str) -> Any | None:
        try:
            return self.connection.get(key)
        except Exception as e:
            self.log(f"unable to get entry {key}: {e}", logging.WARNING)
            return None

    def set(self, key: str, value: Any, ttl: int) -> bool:
        try:
            return self.connection.set(key, value, expire=ttl, noreply=False)
        except Exception as e:
            self.log(f"unable to set entry {key}: {e}", logging.WARNING)
            return False

    def _delete_one(self, key: str) -> bool:
        try:
            deleted = self.connection.delete(key, noreply=False)
        except Exception as e:
            self.log(f"unable to delete entry {key}: {e}", logging.WARNING)
            return False

        if not deleted:
            self.log(f"unable to delete entry {key}", logging.WARNING)
        return bool(deleted)

    def flush(self) -> bool:
        try:
            self.connection.flush_all(noreply=False)
        except Exception as e:
            self.log(f"unable to flush cache: {e}", logging.WARNING)
            return False
        return True

    def close(self) -> None:
        if not self.persistent:
            for node in self.nodes.values():
                node.close()
            if self.connection is not None:
                self.connection.close()
        self.nodes = {}
        self.connection = None
