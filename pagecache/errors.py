"""
Pagecache — Core Error Types

Defines the exception hierarchy used inside the cache backend layer.
All exceptions inherit from PageCacheError for consistent handling.

None of these escape a public CacheBackend operation: drivers raise them,
the facade absorbs them into boolean/None results plus a diagnostic line.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """
    Standard error codes attached to diagnostic log lines.
    """

    # Configuration errors
    INVALID_CONFIG = "INVALID_CONFIG"
    EMPTY_SERVER_POOL = "EMPTY_SERVER_POOL"

    # Initialization errors
    EXTENSION_MISSING = "EXTENSION_MISSING"
    INIT_FAILED = "INIT_FAILED"

    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class PageCacheError(Exception):
    """Base exception for all pagecache errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for structured logging."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(PageCacheError):
    """Raised when configuration is invalid or missing."""


class BackendInitError(PageCacheError):
    """Base exception for driver initialization failures."""


class ExtensionMissingError(BackendInitError):
    """Raised when the client library a driver needs cannot be imported."""

    def __init__(self, package: str, backend: str, install_hint: str | None = None):
        message = f"Required client library '{package}' is missing for backend {backend}"
        if install_hint:
            message += f". Install with: {install_hint}"
        super().__init__(
            message,
            {"package": package, "backend": backend, "install_hint": install_hint},
        )
        self.package = package


class EmptyServerPoolError(BackendInitError):
    """Raised when a networked driver is initialized without servers."""

    def __init__(self, backend: str):
        super().__init__(
            f"{backend} servers list is empty, init failed",
            {"backend": backend},
        )


def extract_error_code(error: Exception) -> ErrorCode:
    """
    Map an exception to the ErrorCode used in log lines.

    Args:
        error: Exception to categorize

    Returns:
        Appropriate ErrorCode for the exception
    """
    if isinstance(error, ExtensionMissingError):
        return ErrorCode.EXTENSION_MISSING

    if isinstance(error, EmptyServerPoolError):
        return ErrorCode.EMPTY_SERVER_POOL

    if isinstance(error, BackendInitError):
        return ErrorCode.INIT_FAILED

    if isinstance(error, ConfigurationError):
        return ErrorCode.INVALID_CONFIG

    return ErrorCode.UNKNOWN_ERROR
