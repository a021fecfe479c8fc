"""
Pagecache — Configuration Loader

Loads and validates configuration from environment variables and .env files.
Provides a singleton configuration instance for hosts that do not build their
own BackendConfig.
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

from ..errors import ConfigurationError
from .schemas import BackendConfig

logger = logging.getLogger(__name__)

_config_instance: BackendConfig | None = None


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def load_config(
    env_file: str | None = None,
    reload: bool = False,
) -> BackendConfig:
    """
    Load configuration from environment variables and .env file.

    Args:
        env_file: Path to .env file (default: .env in current directory)
        reload: Force reload even if config already loaded

    Returns:
        Validated BackendConfig instance

    Raises:
        ConfigurationError: If configuration is invalid
    """
    global _config_instance

    if _config_instance is not None and not reload:
        return _config_instance

    if env_file:
        env_path = Path(env_file)
    else:
        env_path = Path.cwd() / ".env"

    if env_path.exists():
        logger.info(f"Loading environment from {env_path}")
        try:
            load_dotenv(env_path, override=True)
        except Exception as e:
            logger.error(
                f"Failed to load .env file from {env_path}: {e}",
                extra={"path": str(env_path), "error": str(e)},
                exc_info=True,
            )
            raise ConfigurationError(
                f"Failed to load environment file: {e}",
                details={"path": str(env_path), "error": str(e)},
            ) from e
    else:
        logger.debug("No .env file found, using environment variables only")

    try:
        config_dict = {
            "backend_type": os.getenv("PAGECACHE_BACKEND", "local"),
            "hosts": os.getenv("PAGECACHE_HOSTS", "127.0.0.1:11211"),
            "expire_seconds": int(os.getenv("PAGECACHE_EXPIRE", "300")),
            "persistent_connection": _env_flag("PAGECACHE_PERSISTENT"),
            "persistent_id": os.getenv("PAGECACHE_PERSISTENT_ID", "pagecache"),
            "invalidation_method": os.getenv("PAGECACHE_INVALIDATION", "flush"),
            "debug_enabled": _env_flag("PAGECACHE_DEBUG"),
            "logging_enabled": _env_flag("PAGECACHE_LOG", "true"),
            "prefix_meta": os.getenv("PAGECACHE_PREFIX_META", "meta-"),
            "prefix_data": os.getenv("PAGECACHE_PREFIX_DATA", "data-"),
            "local_max_size": int(os.getenv("PAGECACHE_LOCAL_MAX_SIZE", "10000")),
            "socket_timeout": float(os.getenv("PAGECACHE_SOCKET_TIMEOUT", "3.0")),
        }
    except ValueError as e:
        raise ConfigurationError(
            f"Invalid numeric value in environment: {e}",
            details={"error": str(e)},
        ) from e

    try:
        _config_instance = BackendConfig(**config_dict)  # type: ignore[arg-type]
        logger.info(
            f"Configuration loaded successfully (backend: {_config_instance.backend_type.value})",
            extra={"backend": _config_instance.backend_type.value, "hosts": _config_instance.hosts},
        )
        return _config_instance
    except ValidationError as e:
        logger.error(
            f"Configuration validation failed: {e}",
            extra={"validation_errors": e.errors(), "config_dict_keys": list(config_dict.keys())},
        )
        raise ConfigurationError(
            "Configuration validation failed. Check your PAGECACHE_* environment variables.",
            details={"validation_errors": e.errors()},
        ) from e


def get_config() -> BackendConfig:
    """
    Get the current configuration instance, loading it on first use.

    Returns:
        Current BackendConfig instance
    """
    if _config_instance is None:
        return load_config()
    return _config_instance


def reload_config(env_file: str | None = None) -> BackendConfig:
    """Force a reload of the configuration from the environment."""
    return load_config(env_file=env_file, reload=True)


def reset_config() -> None:
    """Drop the cached configuration. Used by tests."""
    global _config_instance
    _config_instance = None
