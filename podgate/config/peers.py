"""Peer registry configuration."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PeersConfig(BaseSettings):
    """Peer registry and self-test settings."""

    model_config = SettingsConfigDict(env_prefix="", extra="ignore")

    public_uri: str | None = Field(default=None)
    bootstrap_peers: str | None = Field(default=None)
    peers_file: str | None = Field(default=None)
    max_limit: int = Field(default=1000, ge=1, le=1000, alias="peers_max_limit")
    self_test_enabled: bool = Field(default=True)

    def get_bootstrap_peers(self) -> list[str]:
        """Split the comma-separated bootstrap peer list."""
        if not self.bootstrap_peers:
            return []
        return [peer.strip() for peer in self.bootstrap_peers.split(",") if peer.strip()]
