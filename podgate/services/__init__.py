"""Services for the pod gateway."""

from .health import HealthCheckService, HealthStatus
from .hyper import HyperClient
from .peers import PeerDatabase
from .selftest import SelfTestService

__all__ = [
    "HealthCheckService",
    "HealthStatus",
    "HyperClient",
    "PeerDatabase",
    "SelfTestService",
]
