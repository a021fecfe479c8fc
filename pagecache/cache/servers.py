"""
Pagecache — Server Pool Parser

Turns the configured ``host:port,host:port`` string into server descriptors.
Invalid tokens are dropped, never raised.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

HOST_SEPARATOR = ","
PORT_SEPARATOR = ":"


@dataclass(frozen=True)
class ServerDescriptor:
    """One networked store node.

    Attributes:
        id: The ``host:port`` token as configured (surrounding whitespace
            already stripped by BackendConfig), used as the status map key
        host: Host name or address
        port: TCP port
    """

    id: str
    host: str
    port: int

    @property
    def address(self) -> tuple[str, int]:
        return (self.host, self.port)


def parse_token(token: str) -> ServerDescriptor | None:
    """Parse one ``host:port`` token, returning None if it is not valid."""
    host, separator, port = token.partition(PORT_SEPARATOR)
    if not separator or not host or not port or not (port.isascii() and port.isdigit()):
        return None
    return ServerDescriptor(id=token, host=host, port=int(port))


def parse_servers(hosts: str) -> dict[str, ServerDescriptor]:
    """
    Parse a delimited host list into server descriptors.

    Args:
        hosts: Comma separated ``host:port`` pairs

    Returns:
        Accepted descriptors keyed by their original token, in input order
    """
    servers: dict[str, ServerDescriptor] = {}
    if not hosts:
        return servers

    for token in hosts.split(HOST_SEPARATOR):
        server = parse_token(token)
        if server is None:
            if token:
                logger.debug("Dropping invalid server token: %r", token)
            continue
        servers[server.id] = server

    return servers
