"""
Pagecache — Driver Factory

Selects the backend driver from configuration. The choice is made once, when
the facade is constructed; operations are then dispatched straight to the
driver instance.

Examples:
    from pagecache.cache.factory import create_driver
    from pagecache.cache.servers import parse_servers
    from pagecache.config import BackendConfig, BackendType
    from pagecache.observability import Diagnostics

    cfg = BackendConfig(backend_type=BackendType.BINARY, hosts="10.0.0.1:11211")
    driver = create_driver(cfg, parse_servers(cfg.hosts), Diagnostics.from_config(cfg))
"""

from __future__ import annotations

import logging
from typing import Any

from ..config.schemas import BackendConfig, BackendType
from ..errors import ConfigurationError
from ..observability.diagnostics import Diagnostics
from .drivers.binary import BinaryDriver
from .drivers.local import LocalDriver
from .drivers.text import TextDriver
from .interface import BackendDriver
from .servers import ServerDescriptor

logger = logging.getLogger(__name__)

DRIVERS: dict[BackendType, type[BackendDriver]] = {
    BackendType.LOCAL: LocalDriver,
    BackendType.BINARY: BinaryDriver,
    BackendType.TEXT: TextDriver,
}


def create_driver(
    config: BackendConfig,
    servers: dict[str, ServerDescriptor],
    diagnostics: Diagnostics,
    **client_factories: Any,
) -> BackendDriver:
    """
    Create the driver for the configured backend type.

    Args:
        config: Backend configuration
        servers: Parsed server pool
        diagnostics: Sink shared with the facade
        **client_factories: Optional native client factories forwarded to the
            driver (``client_factory`` for binary, ``node_factory`` and
            ``pool_factory`` for text)

    Returns:
        An uninitialized driver

    Raises:
        ConfigurationError: If the backend type is not supported
    """
    driver_class = DRIVERS.get(config.backend_type)
    if driver_class is None:
        raise ConfigurationError(
            f"Unknown cache backend: {config.backend_type}",
            details={
                "backend": str(config.backend_type),
                "supported": [backend.value for backend in DRIVERS],
            },
        )

    logger.debug(
        "Creating %s driver for %d server(s)",
        config.backend_type.value,
        len(servers),
        extra={"backend": config.backend_type.value},
    )
    return driver_class(config, servers, diagnostics, **client_factories)
