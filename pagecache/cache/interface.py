"""
Pagecache — Driver Interface

Defines the abstract interface that every backend driver implements, the
driver state machine and the per-server health values.
"""

from __future__ import annotations

import importlib
import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from enum import Enum, IntEnum
from types import ModuleType
from typing import Any, ClassVar

from ..config.schemas import BackendConfig, BackendType
from ..errors import BackendInitError, EmptyServerPoolError, ExtensionMissingError
from ..observability.diagnostics import Diagnostics
from .servers import ServerDescriptor


class ServerHealth(IntEnum):
    """Health of one server in the status map."""

    UNKNOWN = -1
    DOWN = 0
    UP = 1


class DriverState(str, Enum):
    """Driver lifecycle.

    UNINITIALIZED -> INITIALIZING -> ALIVE | FAILED
    """

    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    ALIVE = "alive"
    FAILED = "failed"


class BackendDriver(ABC):
    """
    Abstract base class for backend drivers.

    A driver wraps one native store client. init() moves it to ALIVE or
    FAILED; the facade only dispatches operations to an ALIVE driver.
    Operation failures are logged and reported through return values, they
    never change the state.
    """

    backend_type: ClassVar[BackendType]
    # Drivers whose _initialize already fills the status map skip the extra probe
    probe_after_init: ClassVar[bool] = True

    def __init__(
        self,
        config: BackendConfig,
        servers: dict[str, ServerDescriptor],
        diagnostics: Diagnostics,
    ):
        self.config = config
        self.servers = servers
        self.diagnostics = diagnostics
        self.state = DriverState.UNINITIALIZED
        self.status: dict[str, ServerHealth] = {}
        self.connection: Any = None

    @property
    def alive(self) -> bool:
        return self.state is DriverState.ALIVE

    @property
    def persistent(self) -> bool:
        return self.config.persistent_connection

    def log(self, message: Any, level: int = logging.WARNING) -> None:
        self.diagnostics.log(message, level)

    # ------------ Lifecycle ------------

    def init(self) -> dict[str, ServerHealth]:
        """
        Initialize the driver and probe server status.

        Calling init() on an already alive driver re-initializes it without
        duplicating servers already known to the connection handle.

        Returns:
            The refreshed status map

        Raises:
            BackendInitError: If the driver cannot be brought up
        """
        previously_alive = self.alive
        self.state = DriverState.INITIALIZING
        try:
            self._initialize(previously_alive)
        except BackendInitError:
            self.state = DriverState.FAILED
            raise
        except Exception as e:
            self.state = DriverState.FAILED
            raise BackendInitError(
                f"error initializing {self.backend_type.value} backend: {e}",
                details={"backend": self.backend_type.value, "error": str(e)},
            ) from e

        self.state = DriverState.ALIVE
        if not self.probe_after_init:
            return self.status
        return self.status_probe()

    @abstractmethod
    def _initialize(self, previously_alive: bool) -> None:
        """Create or reuse the connection handle. Raise BackendInitError on failure."""

    def _require_module(self, module: str, package: str) -> ModuleType:
        """Capability check: import the client library or fail initialization."""
        try:
            return importlib.import_module(module)
        except ImportError as e:
            raise ExtensionMissingError(
                package=package,
                backend=self.backend_type.value,
                install_hint=f"pip install {package}",
            ) from e

    def _require_servers(self, previously_alive: bool) -> None:
        if not self.servers and not previously_alive:
            raise EmptyServerPoolError(self.backend_type.value)

    # ------------ Operations ------------

    @abstractmethod
    def get(self, key: str) -> Any | None:
        """
        Retrieve a payload.

        Returns:
            The stored payload, or None on miss or error
        """

    @abstractmethod
    def set(self, key: str, value: Any, ttl: int) -> bool:
        """
        Store a payload.

        Args:
            key: Cache key
            value: Opaque payload
            ttl: Time-to-live in seconds, 0 means no expiry

        Returns:
            The native client's result
        """

    @abstractmethod
    def _delete_one(self, key: str) -> bool:
        """Delete a single key."""

    def delete(self, keys: str | Iterable[str]) -> bool:
        """
        Delete one key or several keys, one at a time.

        Returns:
            True if every key was deleted
        """
        if isinstance(keys, str):
            keys = [keys]

        deleted_all = True
        for key in keys:
            if self._delete_one(key):
                self.log(f"entry deleted: {key}", logging.DEBUG)
            else:
                deleted_all = False
        return deleted_all

    @abstractmethod
    def flush(self) -> bool:
        """Clear every entry the connection serves."""

    @abstractmethod
    def status_probe(self) -> dict[str, ServerHealth]:
        """Refresh and return the per-server status map."""

    def close(self) -> None:
        """Release a non-persistent connection handle."""
        self.connection = None
