"""
Unit tests for ServerConfig.
"""

import pytest

from movieserver.config import ServerConfig


class TestServerConfig:

    def test_defaults(self):
        config = ServerConfig()

        assert config.host == "0.0.0.0"
        assert config.port == 8080
        assert config.log_level == "INFO"
        assert config.log_format == "text"
        config.validate()

    def test_port_zero_is_valid(self):
        ServerConfig(port=0).validate()

    @pytest.mark.parametrize("kwargs", [
        {"port": -1},
        {"port": 65536},
        {"min_workers": 0},
        {"min_workers": 8, "max_workers": 4},
        {"queue_size": 0},
        {"buffer_size": 100},
        {"timeout": 0},
        {"log_level": "LOUD"},
        {"log_format": "xml"},
    ])
    def test_validate_rejects(self, kwargs):
        with pytest.raises(ValueError):
            ServerConfig(**kwargs).validate()


class TestFromEnv:

    def test_defaults_without_env(self, monkeypatch):
        for name in ("MOVIES_HOST", "MOVIES_PORT", "MOVIES_WORKERS",
                     "MOVIES_TIMEOUT", "MOVIES_LOG_LEVEL", "MOVIES_LOG_FORMAT"):
            monkeypatch.delenv(name, raising=False)

        config = ServerConfig.from_env()

        assert config.host == "0.0.0.0"
        assert config.port == 8080
        assert config.max_workers == 16

    def test_reads_env(self, monkeypatch):
        monkeypatch.setenv("MOVIES_HOST", "127.0.0.1")
        monkeypatch.setenv("MOVIES_PORT", "3000")
        monkeypatch.setenv("MOVIES_WORKERS", "2")
        monkeypatch.setenv("MOVIES_TIMEOUT", "2.5")
        monkeypatch.setenv("MOVIES_LOG_LEVEL", "debug")
        monkeypatch.setenv("MOVIES_LOG_FORMAT", "JSON")

        config = ServerConfig.from_env()

        assert config.host == "127.0.0.1"
        assert config.port == 3000
        assert config.max_workers == 2
        assert config.min_workers == 2
        assert config.timeout == 2.5
        assert config.log_level == "DEBUG"
        assert config.log_format == "json"
        config.validate()

    def test_bad_port(self, monkeypatch):
        monkeypatch.setenv("MOVIES_PORT", "http")

        with pytest.raises(ValueError):
            ServerConfig.from_env()
