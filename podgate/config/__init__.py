"""Configuration management for the pod gateway.

This module provides a unified Settings class with flat environment-backed
fields and grouped views for each concern.

Usage:
    from podgate.config import settings

    # Access grouped settings
    settings.api.host
    settings.hyper.socket_path
    settings.peers.get_bootstrap_peers()

    # Or use the flat fields directly
    settings.api_host
    settings.hyper_socket
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Import grouped configurations
from .api import APIConfig
from .hyper import HyperConfig
from .logging import LoggingConfig
from .peers import PeersConfig


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore")

    # API Configuration
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8000, ge=1, le=65535)
    api_debug: bool = Field(default=False)
    api_reload: bool = Field(default=False)
    enable_docs: bool = Field(default=True)

    # hyperd Configuration
    hyper_socket: str = Field(default="/var/run/hyper.sock", description="Path to the hyperd Unix domain socket")
    hyper_noop: bool = Field(
        default=False,
        description="Dry-run mode: never contact the daemon and return benign defaults",
    )
    hyper_request_timeout: float = Field(default=30.0, gt=0, le=3600)
    hyper_connect_timeout: float = Field(default=5.0, gt=0, le=300)
    hyper_create_timeout: float = Field(
        default=300.0,
        gt=0,
        le=3600,
        description="Timeout for pod creation, which may materialize images",
    )
    hyper_pull_timeout: float = Field(default=600.0, gt=0, le=3600, description="Timeout for a single image pull")
    hyper_retry_attempts: int = Field(
        default=1,
        ge=1,
        le=10,
        description="Attempts for idempotent daemon reads and image pulls (1 = no retry)",
    )
    hyper_retry_backoff: float = Field(default=0.5, ge=0, le=60)
    hyper_retry_max_backoff: float = Field(default=5.0, ge=0, le=300)
    hyper_repull_on_create_failure: bool = Field(
        default=False,
        description="Pull the pod's images and retry creation once after a failed create",
    )

    # Peer Registry Configuration
    public_uri: str | None = Field(default=None, description="Public URI this node advertises to peers")
    bootstrap_peers: str | None = Field(default=None, description="Comma-separated list of initial peers")
    peers_file: str | None = Field(default=None, description="JSON file used to persist known peers")
    peers_max_limit: int = Field(default=1000, ge=1, le=1000)

    # Self-test Configuration
    self_test_enabled: bool = Field(default=True)

    # Logging Configuration
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")
    log_file: str | None = Field(default=None)
    log_max_size_mb: int = Field(default=100, ge=1)
    log_backup_count: int = Field(default=5, ge=1)
    enable_access_logs: bool = Field(default=True)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Ensure the log level is one the logging module knows."""
        if v.upper() not in ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"):
            raise ValueError(f"Unknown log level: {v}")
        return v.upper()

    @field_validator("public_uri")
    @classmethod
    def validate_public_uri(cls, v):
        """Public URI must carry a scheme so peers can dial it."""
        if v and not v.startswith(("http://", "https://")):
            raise ValueError("PUBLIC_URI must start with http:// or https://")
        return v.rstrip("/") if v else v

    # ========================================================================
    # GROUPED CONFIG ACCESS
    # ========================================================================

    @property
    def api(self) -> APIConfig:
        """Access API configuration group."""
        return APIConfig(
            api_host=self.api_host,
            api_port=self.api_port,
            api_debug=self.api_debug,
            api_reload=self.api_reload,
            enable_docs=self.enable_docs,
        )

    @property
    def hyper(self) -> HyperConfig:
        """Access hyperd client configuration group."""
        return HyperConfig(
            hyper_socket=self.hyper_socket,
            hyper_noop=self.hyper_noop,
            hyper_request_timeout=self.hyper_request_timeout,
            hyper_connect_timeout=self.hyper_connect_timeout,
            hyper_create_timeout=self.hyper_create_timeout,
            hyper_pull_timeout=self.hyper_pull_timeout,
            hyper_retry_attempts=self.hyper_retry_attempts,
            hyper_retry_backoff=self.hyper_retry_backoff,
            hyper_retry_max_backoff=self.hyper_retry_max_backoff,
            hyper_repull_on_create_failure=self.hyper_repull_on_create_failure,
        )

    @property
    def peers(self) -> PeersConfig:
        """Access peer registry configuration group."""
        return PeersConfig(
            public_uri=self.public_uri,
            bootstrap_peers=self.bootstrap_peers,
            peers_file=self.peers_file,
            peers_max_limit=self.peers_max_limit,
            self_test_enabled=self.self_test_enabled,
        )

    @property
    def logging(self) -> LoggingConfig:
        """Access logging configuration group."""
        return LoggingConfig(
            log_level=self.log_level,
            log_format=self.log_format,
            log_file=self.log_file,
            log_max_size_mb=self.log_max_size_mb,
            log_backup_count=self.log_backup_count,
            enable_access_logs=self.enable_access_logs,
        )


# Global settings instance
settings = Settings()

__all__ = [
    "Settings",
    "settings",
    "APIConfig",
    "HyperConfig",
    "LoggingConfig",
    "PeersConfig",
]
