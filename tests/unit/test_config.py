"""Unit tests for settings and grouped configuration."""

import pytest
from pydantic import ValidationError

from podgate.config import Settings
from podgate.config.hyper import HyperConfig
from podgate.config.peers import PeersConfig


class TestSettings:
    """Tests for the flat settings."""

    def test_defaults(self, monkeypatch):
        for var in ("HYPER_SOCKET", "HYPER_NOOP", "PUBLIC_URI", "LOG_LEVEL"):
            monkeypatch.delenv(var, raising=False)

        settings = Settings(_env_file=None)

        assert settings.hyper_socket == "/var/run/hyper.sock"
        assert settings.hyper_noop is False
        assert settings.hyper_retry_attempts == 1
        assert settings.hyper_repull_on_create_failure is False
        assert settings.peers_max_limit == 1000

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("HYPER_SOCKET", "/run/hyperd.sock")
        monkeypatch.setenv("HYPER_NOOP", "true")
        monkeypatch.setenv("HYPER_CREATE_TIMEOUT", "90")

        settings = Settings(_env_file=None)

        assert settings.hyper.socket_path == "/run/hyperd.sock"
        assert settings.hyper.noop is True
        assert settings.hyper.create_timeout == 90.0

    def test_log_level_normalized(self):
        assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, log_level="verbose")

    def test_public_uri_trailing_slash(self):
        settings = Settings(_env_file=None, public_uri="https://node.example.com/")

        assert settings.public_uri == "https://node.example.com"
        assert settings.peers.public_uri == "https://node.example.com"

    def test_public_uri_requires_scheme(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, public_uri="node.example.com")

    def test_peers_max_limit_bounded(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, peers_max_limit=1001)

    def test_grouped_api(self):
        settings = Settings(_env_file=None, api_port=9090, api_reload=True)

        assert settings.api.port == 9090
        assert settings.api.reload is True

    def test_grouped_logging(self):
        settings = Settings(_env_file=None, log_format="text", log_max_size_mb=10)

        assert settings.logging.format == "text"
        assert settings.logging.max_size_mb == 10


class TestHyperConfig:
    """Tests for HyperConfig bounds."""

    @pytest.mark.parametrize(
        "field,value",
        [
            ("hyper_request_timeout", 3601),
            ("hyper_connect_timeout", 301),
            ("hyper_create_timeout", 3601),
            ("hyper_pull_timeout", 3601),
            ("hyper_retry_attempts", 11),
            ("hyper_retry_backoff", 61),
            ("hyper_retry_max_backoff", 301),
        ],
    )
    def test_same_bounds_as_settings(self, field, value):
        with pytest.raises(ValidationError):
            HyperConfig(**{field: value})
        with pytest.raises(ValidationError):
            Settings(_env_file=None, **{field: value})

    def test_upper_bounds_accepted(self):
        config = HyperConfig(hyper_request_timeout=3600, hyper_connect_timeout=300)

        assert config.request_timeout == 3600.0
        assert config.connect_timeout == 300.0


class TestPeersConfig:
    """Tests for PeersConfig."""

    def test_bootstrap_peers_split(self):
        config = PeersConfig(bootstrap_peers=" a.example.com, ,https://b.example.com ")

        assert config.get_bootstrap_peers() == ["a.example.com", "https://b.example.com"]

    def test_no_bootstrap_peers(self):
        assert PeersConfig(bootstrap_peers=None).get_bootstrap_peers() == []
