"""
Pagecache — Error Hierarchy Tests
"""

import pytest

from pagecache.errors import (
    BackendInitError,
    ConfigurationError,
    EmptyServerPoolError,
    ErrorCode,
    ExtensionMissingError,
    PageCacheError,
    extract_error_code,
)


def test_to_dict() -> None:
    error = PageCacheError("broken", {"key": "value"})
    assert error.to_dict() == {"error": "PageCacheError", "message": "broken", "details": {"key": "value"}}


def test_extension_missing_message() -> None:
    error = ExtensionMissingError("pymemcache", "text", "pip install pymemcache")

    assert isinstance(error, BackendInitError)
    assert error.package == "pymemcache"
    assert "Install with: pip install pymemcache" in str(error)
    assert error.details["backend"] == "text"


def test_empty_pool_message() -> None:
    assert str(EmptyServerPoolError("binary")) == "binary servers list is empty, init failed"


@pytest.mark.parametrize(
    ("error", "code"),
    [
        (ExtensionMissingError("bmemcached", "binary"), ErrorCode.EXTENSION_MISSING),
        (EmptyServerPoolError("text"), ErrorCode.EMPTY_SERVER_POOL),
        (BackendInitError("self test failed"), ErrorCode.INIT_FAILED),
        (ConfigurationError("bad value"), ErrorCode.INVALID_CONFIG),
        (RuntimeError("other"), ErrorCode.UNKNOWN_ERROR),
    ],
)
def test_extract_error_code(error: Exception, code: ErrorCode) -> None:
    assert extract_error_code(error) is code
