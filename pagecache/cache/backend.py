"""
Pagecache — Backend Facade

The single entry point used by the host application. Holds configuration and
aliveness, builds cache keys, dispatches every operation to the driver chosen
at construction and logs each outcome.

Nothing raised by a driver or a collaborator escapes this class: failures
come back as False/None plus a diagnostic line.

Example:
    backend = CacheBackend(BackendConfig(backend_type="local"))
    request = RequestContext.from_environ(environ)
    key = backend.key(request, "data")
    page = backend.get(key)
    if page is None:
        backend.set(key, render())
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from typing import Any

from ..config.schemas import BackendConfig, InvalidationMethod
from ..errors import BackendInitError, ExtensionMissingError, extract_error_code
from ..observability.diagnostics import Diagnostics
from .factory import create_driver
from .interface import BackendDriver, ServerHealth
from .request import HTTP, RequestContext
from .servers import ServerDescriptor, parse_servers

logger = logging.getLogger(__name__)

KEY_META = "meta"
KEY_DATA = "data"

# Resolves a content identifier to its canonical path (``host/path``), or empty
PathResolver = Callable[[Any], str | None]

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)


class CacheBackend:
    """
    Backend-agnostic cache client.

    Args:
        config: Backend configuration
        resolver: Permalink resolver used by targeted clear()
        diagnostics: Diagnostic sink (built from config if omitted)
        driver: Pre-built driver, bypassing the factory
        **client_factories: Native client factories forwarded to the driver
    """

    def __init__(
        self,
        config: BackendConfig,
        resolver: PathResolver | None = None,
        diagnostics: Diagnostics | None = None,
        driver: BackendDriver | None = None,
        **client_factories: Any,
    ):
        self.config = config
        self.resolver = resolver
        self.diagnostics = diagnostics or Diagnostics.from_config(config)
        self._servers = parse_servers(config.hosts)
        self._status: dict[str, ServerHealth] = {}
        self._driver = driver or create_driver(config, self._servers, self.diagnostics, **client_factories)

        self.log("init starting", logging.INFO)
        self._initialize()

    # ------------ Lifecycle ------------

    def _initialize(self) -> bool:
        try:
            self._status = dict(self._driver.init())
        except BackendInitError as e:
            level = logging.ERROR if isinstance(e, ExtensionMissingError) else logging.WARNING
            self.log({"code": extract_error_code(e).value, **e.to_dict()}, level)
            return False
        return True

    def reinit(self) -> bool:
        """
        Re-initialize the driver.

        Servers already known to the connection handle are not added again.

        Returns:
            True if the backend is alive afterwards
        """
        self.log("reinit starting", logging.INFO)
        return self._initialize()

    def close(self) -> None:
        """Release the driver's connection handle."""
        self._driver.close()

    @property
    def alive(self) -> bool:
        return self._driver.alive

    @property
    def driver(self) -> BackendDriver:
        return self._driver

    def _is_alive(self, operation: str) -> bool:
        if not self.alive:
            self.log(f"backend is not active, exiting function {operation}", logging.WARNING)
            return False
        return True

    # ------------ Keys ------------

    def key(self, request: RequestContext, suffix: str = KEY_META) -> str:
        """
        Build the cache key of the current request.

        The full URL is used so a web server in front of the application can
        compute the same key on its own.
        """
        return f"{suffix}-{request.url}"

    def _targeted_keys(self, path: str, scheme: str) -> list[str]:
        return [
            f"{self.config.prefix_meta}{scheme}://{path}",
            f"{self.config.prefix_data}{scheme}://{path}",
        ]

    # ------------ Operations ------------

    def get(self, key: str) -> Any | None:
        """
        Fetch a payload.

        None is the failure value here, the same result a boolean operation
        reports as False.

        Returns:
            The payload, or None on miss, backend error or inactive backend
        """
        if not self._is_alive("get"):
            return None

        self.log(f"get {key}", logging.DEBUG)
        result = self._driver.get(key)

        if result is None:
            self.log(f"failed to get entry: {key}", logging.WARNING)

        return result

    def set(self, key: str, data: Any) -> bool:
        """Store a payload with the configured expiration time."""
        if not self._is_alive("set"):
            return False

        self.log(f"set {key} expiration time: {self.config.expire_seconds}", logging.DEBUG)
        result = self._driver.set(key, data, self.config.expire_seconds)

        if result is False:
            self.log(f"failed to set entry: {key}", logging.WARNING)

        return result

    def flush(self) -> bool:
        """Flush the entire keyspace, whatever the invalidation method."""
        if not self._is_alive("flush"):
            return False

        self.log("flushing cache", logging.INFO)
        result = self._driver.flush()

        if result is False:
            self.log("failed to flush cache", logging.WARNING)

        return result

    def clear(self, target: Any = None, request: RequestContext | None = None) -> bool:
        """
        Invalidate cached pages.

        With the flush invalidation method the whole keyspace is flushed.
        With the targeted method only the meta and data entries of ``target``
        are deleted; a missing or unresolvable target is refused.

        Args:
            target: Content identifier passed to the resolver
            request: Request whose scheme is used for the targeted keys

        Returns:
            True if the invalidation happened
        """
        if not self._is_alive("clear"):
            return False

        if not target and self.config.invalidation_method != InvalidationMethod.FLUSH:
            self.log("not clearing unidentified post", logging.WARNING)
            return False

        if self.config.invalidation_method == InvalidationMethod.FLUSH or not target:
            return self.flush()

        path = self._resolve_path(target)
        if not path:
            self.log(f"unable to determine path from permalink, identifier: {target}", logging.WARNING)
            return False

        scheme = request.scheme if request is not None else HTTP
        to_clear = self._targeted_keys(path, scheme)
        self.log({"clearing": to_clear}, logging.DEBUG)
        return self._driver.delete(to_clear)

    def _resolve_path(self, target: Any) -> str:
        if self.resolver is None:
            self.log("no permalink resolver configured", logging.WARNING)
            return ""

        try:
            permalink = self.resolver(target)
        except Exception as e:
            self.log(f"permalink resolver failed for {target}: {e}", logging.WARNING)
            logger.debug("Resolver error", exc_info=True)
            return ""

        return _SCHEME_RE.sub("", permalink or "", count=1)

    def status(self) -> dict[str, ServerHealth] | None:
        """
        Probe the backend servers.

        None is the failure value, reported instead of False.

        Returns:
            Mapping of server id to health, or None if the backend is not active
        """
        if not self._is_alive("status"):
            return None

        self._status = dict(self._driver.status_probe())
        return self._status

    def get_servers(self) -> dict[str, ServerDescriptor]:
        """Parsed server pool, keyed by the original ``host:port`` token."""
        return self._servers

    def log(self, message: Any, level: int = logging.WARNING) -> bool:
        """Send a diagnostic line through the configured sink."""
        return self.diagnostics.log(message, level)
