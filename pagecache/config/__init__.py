"""
Pagecache — Configuration Module

Provides typed configuration loading and validation.
"""

from .loader import get_config, load_config, reload_config, reset_config
from .schemas import (
    BackendConfig,
    BackendType,
    InvalidationMethod,
    LogLevel,
)

__all__ = [
    # Loader functions
    "load_config",
    "get_config",
    "reload_config",
    "reset_config",
    # Main config
    "BackendConfig",
    # Enums
    "BackendType",
    "InvalidationMethod",
    "LogLevel",
]
