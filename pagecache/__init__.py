"""
Pagecache

Unified client over in-memory key/value cache backends for full-page
caching: a local in-process store and memcached over the binary or text
protocol, selected by configuration.
"""

from .cache import CacheBackend, RequestContext, ServerHealth, parse_servers
from .config import BackendConfig, BackendType, InvalidationMethod
from .errors import PageCacheError

__version__ = "1.0.0"

__all__ = [
    "BackendConfig",
    "BackendType",
    "CacheBackend",
    "InvalidationMethod",
    "PageCacheError",
    "RequestContext",
    "ServerHealth",
    "parse_servers",
]
