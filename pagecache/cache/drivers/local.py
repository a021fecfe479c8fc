"""
Pagecache — Local Driver

In-process store backed by a cachetools TLRUCache. Each entry carries its
own expiry computed from the TTL given at set time; capacity overflow evicts
the least recently used entry.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from typing import Any

from ...config.schemas import BackendType
from ...errors import BackendInitError
from ..connections import acquire_connection
from ..interface import BackendDriver, ServerHealth

logger = logging.getLogger(__name__)

LOCAL_SERVER_ID = "local"
_PROBE_KEY = "__pagecache_self_test__"


def _time_to_use(key: Any, value: tuple[Any, int], now: float) -> float:
    """Expiry of an entry stored as (payload, ttl)."""
    ttl = value[1]
    return now + ttl if ttl > 0 else math.inf


class LocalStore:
    """
    Thread-safe wrapper around a TLRUCache.

    Values are stored as (payload, ttl) tuples so expiry can differ per entry.
    """

    def __init__(self, maxsize: int, cache_factory: Any):
        self.maxsize = maxsize
        self._cache = cache_factory(maxsize=maxsize, ttu=_time_to_use, timer=time.monotonic)
        self._lock = threading.Lock()

    def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._cache.get(key)
        return None if entry is None else entry[0]

    def set(self, key: str, value: Any, ttl: int) -> bool:
        with self._lock:
            self._cache[key] = (value, ttl)
        return True

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._cache.pop(key, None) is not None

    def clear(self) -> int:
        with self._lock:
            size = len(self._cache)
            self._cache.clear()
        return size

    def self_test(self) -> bool:
        """Write, read back and remove a probe entry."""
        self.set(_PROBE_KEY, True, 0)
        ok = self.get(_PROBE_KEY) is True
        self.delete(_PROBE_KEY)
        return ok

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)


class LocalDriver(BackendDriver):
    """
    Driver for the local in-process store.

    Does not use the server pool. With ``persistent_connection`` the store is
    shared by every local driver in the process that uses the same
    ``persistent_id``.
    """

    backend_type = BackendType.LOCAL

    def _initialize(self, previously_alive: bool) -> None:
        cachetools = self._require_module("cachetools", "cachetools")

        if self.connection is None:
            def create() -> LocalStore:
                return LocalStore(self.config.local_max_size, cachetools.TLRUCache)

            if self.persistent:
                self.connection, _ = acquire_connection(f"local:{self.config.persistent_id}", create)
            else:
                self.connection = create()

        if not self.connection.self_test():
            self.log("local store self-test failed", logging.ERROR)
            raise BackendInitError("local store self-test failed", {"backend": self.backend_type.value})

        self.log("backend OK", logging.INFO)

    def get(self, key: str) -> Any | None:
        return self.connection.get(key)

    def set(self, key: str, value: Any, ttl: int) -> bool:
        return self.connection.set(key, value, ttl)

    def _delete_one(self, key: str) -> bool:
        if self.connection.delete(key):
            return True
        self.log(f"Failed to delete local entry: {key}", logging.ERROR)
        return False

    def flush(self) -> bool:
        cleared = self.connection.clear()
        logger.debug("Flushed %d entries from local store", cleared)
        return True

    def status_probe(self) -> dict[str, ServerHealth]:
        self.status = {LOCAL_SERVER_ID: ServerHealth.UP if self.alive else ServerHealth.DOWN}
        return self.status
