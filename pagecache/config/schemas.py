"""
Pagecache — Configuration Schemas

Defines typed configuration models using Pydantic for validation and type safety.
The caller supplies one BackendConfig per CacheBackend; it is frozen after
construction.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BackendType(str, Enum):
    """Supported cache backends."""

    LOCAL = "local"  # in-process store
    BINARY = "binary"  # memcached, binary protocol
    TEXT = "text"  # memcached, text protocol


class InvalidationMethod(str, Enum):
    """How clear() invalidates cached pages."""

    FLUSH = "flush"
    TARGETED = "targeted"


class LogLevel(str, Enum):
    """Log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class BackendConfig(BaseModel):
    """Cache backend configuration."""

    backend_type: BackendType = Field(default=BackendType.LOCAL, description="Cache backend to use")
    hosts: str = Field(
        default="127.0.0.1:11211",
        description=(
            "Comma separated host:port pairs (networked backends only); whitespace around "
            "each pair is stripped and the stripped pair is the server id"
        ),
    )
    expire_seconds: int = Field(default=300, ge=0, description="Entry TTL in seconds (0 = no expiry)")
    persistent_connection: bool = Field(default=False, description="Share one connection handle per process")
    persistent_id: str = Field(default="pagecache", min_length=1, description="Identifier of the shared handle")
    invalidation_method: InvalidationMethod = Field(
        default=InvalidationMethod.FLUSH,
        description="Full flush or targeted meta/data key deletion on clear()",
    )
    debug_enabled: bool = Field(default=False, description="Emit info/debug diagnostics too")
    logging_enabled: bool = Field(default=True, description="Emit diagnostics at all")
    prefix_meta: str = Field(default="meta-", description="Key prefix of meta entries")
    prefix_data: str = Field(default="data-", description="Key prefix of data entries")

    # Local store settings (only used when backend_type=local)
    local_max_size: int = Field(default=10000, ge=1, description="Max entries of the local store")

    # Networked settings
    socket_timeout: float = Field(default=3.0, gt=0, description="Client socket timeout in seconds")

    @field_validator("hosts")
    @classmethod
    def normalize_hosts(cls, v: str) -> str:
        """Strip whitespace around each host token."""
        return ",".join(token.strip() for token in v.split(",")) if v.strip() else ""

    @property
    def is_networked(self) -> bool:
        return self.backend_type != BackendType.LOCAL

    model_config = ConfigDict(frozen=True)
