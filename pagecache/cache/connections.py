"""
Pagecache — Persistent Connection Registry

Process-wide registry of client handles shared by drivers running with
``persistent_connection`` enabled. A handle is created on first use and
reused by every later driver asking for the same name.

This layer adds no locking of its own; sharing a handle between threads is
only as safe as the underlying client.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

# Global handle registry
_connections: dict[str, Any] = {}


def acquire_connection(name: str, create: Callable[[], Any]) -> tuple[Any, bool]:
    """
    Get the shared handle registered under ``name``, creating it if needed.

    Args:
        name: Registry key, e.g. ``binary:pagecache``
        create: Zero-argument factory for a new handle

    Returns:
        (handle, created) where created is True if the handle is new
    """
    if name in _connections:
        logger.debug("Reusing persistent connection: %s", name)
        return _connections[name], False

    handle = create()
    _connections[name] = handle
    logger.debug("Registered persistent connection: %s", name)
    return handle, True


def release_connection(name: str) -> Any | None:
    """Remove a handle from the registry without closing it."""
    return _connections.pop(name, None)


def close_all_connections() -> None:
    """
    Close every registered handle and empty the registry.

    Handles are closed with the first of ``disconnect_all``, ``close`` or
    ``clear`` they provide.
    """
    if not _connections:
        logger.debug("No persistent connections to close")
        return

    for name, handle in list(_connections.items()):
        for method in ("disconnect_all", "close", "clear"):
            closer = getattr(handle, method, None)
            if callable(closer):
                try:
                    closer()
                except Exception as e:
                    logger.error(
                        "Error closing persistent connection '%s': %s",
                        name,
                        e,
                        extra={"connection": name, "error": str(e)},
                        exc_info=True,
                    )
                break

    _connections.clear()
    logger.info("All persistent connections closed")


def reset_connection_registry() -> None:
    """
    Forget all registered handles without closing them.

    Warning: Only use this in testing contexts.
    """
    count = len(_connections)
    _connections.clear()
    logger.debug("Reset connection registry, cleared %d handle(s)", count)


def list_connections() -> list[str]:
    """List the names of all registered handles."""
    return list(_connections.keys())
