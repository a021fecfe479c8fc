"""
Pagecache — Text Protocol Serde

pymemcache serializer for page payloads. Text is written raw with flags 0 so
a web server reading the same keys gets the page as-is; any other payload is
pickled under pymemcache's pickle flag.
"""

from __future__ import annotations

import pickle
from typing import Any

from pymemcache import serde

# Raw payload flags, readable by clients that know nothing about pickling
STORE_FLAGS = 0


class PageSerde:
    """
    Serde handed to pymemcache clients.

    str and bytes are stored as raw bytes and read back as str; values that
    are not valid UTF-8 come back as bytes. Entries written by other
    pymemcache clients with their own flags fall through to pymemcache's
    default deserializer.
    """

    def __init__(self, pickle_version: int = serde.DEFAULT_PICKLE_VERSION):
        self.pickle_version = pickle_version

    def serialize(self, key: Any, value: Any) -> tuple[bytes, int]:
        if isinstance(value, str):
            return value.encode("utf-8"), STORE_FLAGS
        if isinstance(value, bytes):
            return value, STORE_FLAGS
        return pickle.dumps(value, self.pickle_version), serde.FLAG_PICKLE

    def deserialize(self, key: Any, value: bytes, flags: int) -> Any:
        if flags == STORE_FLAGS:
            try:
                return value.decode("utf-8")
            except UnicodeDecodeError:
                return value
        return serde.python_memcache_deserializer(key, value, flags)
