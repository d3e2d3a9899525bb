"""hyperd daemon configuration."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class HyperConfig(BaseSettings):
    """Settings for the pod lifecycle client and its daemon transport."""

    model_config = SettingsConfigDict(env_prefix="", extra="ignore")

    socket_path: str = Field(default="/var/run/hyper.sock", alias="hyper_socket")
    noop: bool = Field(default=False, alias="hyper_noop")

    # Timeouts (seconds), enforced by the transport on every call
    request_timeout: float = Field(default=30.0, gt=0, le=3600, alias="hyper_request_timeout")
    connect_timeout: float = Field(default=5.0, gt=0, le=300, alias="hyper_connect_timeout")
    create_timeout: float = Field(default=300.0, gt=0, le=3600, alias="hyper_create_timeout")
    pull_timeout: float = Field(default=600.0, gt=0, le=3600, alias="hyper_pull_timeout")

    # Retry policy for idempotent calls (1 = no retry)
    retry_attempts: int = Field(default=1, ge=1, le=10, alias="hyper_retry_attempts")
    retry_backoff: float = Field(default=0.5, ge=0, le=60, alias="hyper_retry_backoff")
    retry_max_backoff: float = Field(default=5.0, ge=0, le=300, alias="hyper_retry_max_backoff")

    # Pull images and retry create once after a failed create
    repull_on_create_failure: bool = Field(default=False, alias="hyper_repull_on_create_failure")
