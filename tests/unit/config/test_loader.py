"""
Pagecache — Configuration Tests

Tests BackendConfig validation and environment loading.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from pagecache.cache.servers import parse_servers
from pagecache.config import (
    BackendConfig,
    BackendType,
    InvalidationMethod,
    get_config,
    load_config,
    reload_config,
)
from pagecache.errors import ConfigurationError


class TestBackendConfig:
    def test_defaults(self) -> None:
        config = BackendConfig()

        assert config.backend_type is BackendType.LOCAL
        assert config.invalidation_method is InvalidationMethod.FLUSH
        assert config.expire_seconds == 300
        assert config.prefix_meta == "meta-"
        assert config.prefix_data == "data-"
        assert not config.is_networked

    def test_frozen(self) -> None:
        config = BackendConfig()
        with pytest.raises(ValidationError):
            config.expire_seconds = 10  # type: ignore[misc]

    def test_negative_expire_rejected(self) -> None:
        with pytest.raises(ValidationError):
            BackendConfig(expire_seconds=-1)

    def test_hosts_whitespace_stripped(self) -> None:
        config = BackendConfig(backend_type="binary", hosts=" 10.0.0.1:11211 , 10.0.0.2:11211 ")
        assert config.hosts == "10.0.0.1:11211,10.0.0.2:11211"
        assert config.is_networked

    def test_server_ids_are_stripped_tokens(self) -> None:
        config = BackendConfig(backend_type="text", hosts=" 10.0.0.1:11211 ,cache.local:11212")
        assert list(parse_servers(config.hosts)) == ["10.0.0.1:11211", "cache.local:11212"]

    def test_empty_hosts_allowed(self) -> None:
        """An empty pool is reported at driver init, not at validation."""
        assert BackendConfig(backend_type="text", hosts="  ").hosts == ""


class TestLoader:
    def test_load_from_environment(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("PAGECACHE_BACKEND", "binary")
        monkeypatch.setenv("PAGECACHE_HOSTS", "10.0.0.1:11211")
        monkeypatch.setenv("PAGECACHE_EXPIRE", "120")
        monkeypatch.setenv("PAGECACHE_PERSISTENT", "1")
        monkeypatch.setenv("PAGECACHE_INVALIDATION", "targeted")
        monkeypatch.setenv("PAGECACHE_DEBUG", "true")

        config = load_config(reload=True)

        assert config.backend_type is BackendType.BINARY
        assert config.hosts == "10.0.0.1:11211"
        assert config.expire_seconds == 120
        assert config.persistent_connection is True
        assert config.invalidation_method is InvalidationMethod.TARGETED
        assert config.debug_enabled is True
        assert config.logging_enabled is True

    def test_env_file(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        env_file = tmp_path / "cache.env"
        env_file.write_text("PAGECACHE_BACKEND=text\nPAGECACHE_PREFIX_META=m:\n")
        # Registered with monkeypatch so the values dotenv writes are undone
        monkeypatch.setenv("PAGECACHE_BACKEND", "local")
        monkeypatch.setenv("PAGECACHE_PREFIX_META", "meta-")

        config = load_config(env_file=str(env_file), reload=True)

        assert config.backend_type is BackendType.TEXT
        assert config.prefix_meta == "m:"

    def test_singleton(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.chdir(tmp_path)
        first = get_config()
        assert get_config() is first
        assert reload_config() is not first

    def test_invalid_backend(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("PAGECACHE_BACKEND", "redis")

        with pytest.raises(ConfigurationError) as exc_info:
            load_config(reload=True)

        assert "validation_errors" in exc_info.value.details

    def test_invalid_number(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("PAGECACHE_EXPIRE", "soon")

        with pytest.raises(ConfigurationError):
            load_config(reload=True)
