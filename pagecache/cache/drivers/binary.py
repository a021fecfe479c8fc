"""
Pagecache — Memcached Binary Protocol Driver

Uses python-binary-memcached (``bmemcached``). One client handle serves the
whole server pool; entries are stored uncompressed so other readers of the
same keys (e.g. a web server's memcached module) can consume them.
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

ClientFactory = Callable[[list[str]], Any]


def error_code(error: Exception | None) -> Any:
    """Native result code carried by a client exception, if any."""
    return getattr(error, "code", None) if error is not None else None


def is_up(details: Any) -> bool:
    """A server reporting a non-zero uptime is considered up."""
    if not isinstance(details, dict):
        return False
    uptime = details.get("uptime", details.get(b"uptime"))
    if isinstance(uptime, bytes):
        uptime = uptime.decode("ascii", "replace")
    return bool(uptime) and str(uptime) != "0"


class BinaryDriver(BackendDriver):
    """Driver for memcached over the binary protocol."""

    backend_type = BackendType.BINARY

    def __init__(
        self,
        config: BackendConfig,
        servers: dict[str, ServerDescriptor],
        diagnostics: Diagnostics,
        client_factory: ClientFactory | None = None,
    ):
        super().__init__(config, servers, diagnostics)
        self._client_factory = client_factory

    def _default_factory(self) -> ClientFactory:
        bmemcached = self._require_module("bmemcached", "python-binary-memcached")
        timeout = self.config.socket_timeout

        def create(server_ids: list[str]) -> Any:
            return bmemcached.Client(server_ids, compression=None, socket_timeout=timeout)

        return create

    def _known_servers(self) -> list[str]:
        """Servers already present in the connection handle's pool."""
        known = []
        for server in self.connection.servers:
            server_id = getattr(server, "server", None)
            if server_id is None and hasattr(server, "host"):
                server_id = f"{server.host}:{server.port}"
            if server_id:
                known.append(server_id)
        return known

    def _initialize(self, previously_alive: bool) -> None:
        factory = self._client_factory or self._default_factory()
        self._require_servers(previously_alive)

        added: list[str] = []
        if self.connection is None:
            server_ids = list(self.servers)

            def create() -> Any:
                return factory(server_ids)

            if self.persistent:
                self.connection, created = acquire_connection(f"binary:{self.config.persistent_id}", create)
            else:
                self.connection, created = create(), True

            if created:
                added = server_ids

        # Only add servers the handle does not know yet
        known = self._known_servers()
        missing = [server_id for server_id in self.servers if server_id not in known and server_id not in added]
        if missing:
            self.connection.set_servers(known + missing)
            added.extend(missing)

        for server_id in self.servers:
            self.status[server_id] = ServerHealth.UNKNOWN

        for server_id in added:
            self.log(f"{server_id} added, persistent mode: {self.persistent}", logging.INFO)

    def status_probe(self) -> dict[str, ServerHealth]:
        self.log("checking server statuses", logging.INFO)

        for server_id in self.servers:
            self.status[server_id] = ServerHealth.DOWN

        try:
            report = self.connection.stats()
        except Exception as e:
            self.log(f"unable to read server stats, Memcached error code: {error_code(e)}", logging.WARNING)
            logger.debug("stats() failed", exc_info=True)
            return self.status

        for server_id, details in (report or {}).items():
            if isinstance(server_id, bytes):
                server_id = server_id.decode("ascii", "replace")
            self.status[server_id] = ServerHealth.DOWN
            if is_up(details):
                self.log(f"{server_id} server is up & running", logging.INFO)
                self.status[server_id] = ServerHealth.UP

        return self.status

    def get(self, key: str) -> Any | None:
        try:
            return self.connection.get(key)
        except Exception as e:
            self.log(f"unable to get entry {key}, Memcached error code: {error_code(e)}", logging.WARNING)
            return None

    def set(self, key: str, value: Any, ttl: int) -> bool:
        failure: Exception | None = None
        try:
            result = self.connection.set(key, value, time=ttl)
        except Exception as e:
            failure = e
            result = False

        if result is False:
            self.log(
                f"unable to set entry {key}, Memcached error code: {error_code(failure)}",
                logging.WARNING,
            )
        return result

    def _delete_one(self, key: str) -> bool:
        failure: Exception | None = None
        try:
            result = self.connection.delete(key)
        except Exception as e:
            failure = e
            result = False

        if not result:
            self.log(
                f"unable to delete entry {key}, Memcached error code: {error_code(failure)}",
                logging.WARNING,
            )
            return False
        return True

    def flush(self) -> bool:
        try:
            return bool(self.connection.flush_all())
        except Exception as e:
            self.log(f"unable to flush cache, Memcached error code: {error_code(e)}", logging.WARNING)
            return False

    def close(self) -> None:
        if self.connection is not None and not self.persistent:
            self.connection.disconnect_all()
        self.connection = None
