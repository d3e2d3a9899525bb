"""Dependency injection for the pod gateway."""

from .services import (
    get_hyper_client,
    get_peer_database,
    get_self_test_service,
    get_health_service,
    HyperClientDep,
    PeerDatabaseDep,
    SelfTestServiceDep,
    HealthServiceDep,
)

__all__ = [
    "get_hyper_client",
    "get_peer_database",
    "get_self_test_service",
    "get_health_service",
    "HyperClientDep",
    "PeerDatabaseDep",
    "SelfTestServiceDep",
    "HealthServiceDep",
]
