"""Service dependency injection for the pod gateway."""

# Standard library imports
from functools import lru_cache
from typing import Annotated

# Third-party imports
from fastapi import Depends
import structlog

# Local application imports
from ..config import settings
from ..services.health import HealthCheckService
from ..services.hyper import HyperClient
from ..services.peers import PeerDatabase
from ..services.selftest import SelfTestService

logger = structlog.get_logger(__name__)


@lru_cache()
def get_hyper_client() -> HyperClient:
    """Get the pod lifecycle client."""
    client = HyperClient.from_config(settings.hyper)
    logger.info(
        "hyperd client initialized",
        socket=settings.hyper_socket,
        noop=settings.hyper_noop,
    )
    return client


@lru_cache()
def get_peer_database() -> PeerDatabase:
    """Get the peer registry, loaded from its persisted file."""
    peers_config = settings.peers
    peer_db = PeerDatabase(
        public_uri=peers_config.public_uri,
        bootstrap_peers=peers_config.get_bootstrap_peers(),
        peers_file=peers_config.peers_file,
        max_limit=peers_config.max_limit,
    )
    peer_db.load()
    return peer_db


@lru_cache()
def get_self_test_service() -> SelfTestService:
    """Get the self-test service."""
    return SelfTestService(
        get_hyper_client(),
        public_uri=settings.public_uri,
        enabled=settings.self_test_enabled,
    )


@lru_cache()
def get_health_service() -> HealthCheckService:
    """Get the health check service."""
    return HealthCheckService(get_hyper_client(), get_self_test_service())


# Type aliases for dependency injection
HyperClientDep = Annotated[HyperClient, Depends(get_hyper_client)]
PeerDatabaseDep = Annotated[PeerDatabase, Depends(get_peer_database)]
SelfTestServiceDep = Annotated[SelfTestService, Depends(get_self_test_service)]
HealthServiceDep = Annotated[HealthCheckService, Depends(get_health_service)]
