"""
Pagecache — Cache Module

Backend-agnostic full-page cache client with pluggable store drivers.

- backend.py: CacheBackend facade, the entry point for callers
- factory.py: driver selection from configuration
- interface.py: abstract driver interface all backends implement
- drivers/: local, memcached binary and memcached text drivers
- servers.py: server pool parsing
- request.py: request context used to build keys

Usage:
    from pagecache.cache import CacheBackend, RequestContext
    from pagecache.config import BackendConfig

    backend = CacheBackend(BackendConfig(backend_type="binary", hosts="10.0.0.1:11211"))
    backend.set(backend.key(request, "data"), html)
"""

from .backend import KEY_DATA, KEY_META, CacheBackend, PathResolver
from .connections import (
    acquire_connection,
    close_all_connections,
    list_connections,
    release_connection,
    reset_connection_registry,
)
from .factory import create_driver
from .interface import BackendDriver, DriverState, ServerHealth
from .request import RequestContext
from .servers import ServerDescriptor, parse_servers

__all__ = [
    # Facade
    "CacheBackend",
    "PathResolver",
    "KEY_META",
    "KEY_DATA",
    # Drivers
    "BackendDriver",
    "DriverState",
    "ServerHealth",
    "create_driver",
    # Connection registry
    "acquire_connection",
    "close_all_connections",
    "list_connections",
    "release_connection",
    "reset_connection_registry",
    # Collaborators
    "RequestContext",
    "ServerDescriptor",
    "parse_servers",
]
