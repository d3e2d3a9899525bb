"""hyperd pod lifecycle services.

This package provides the daemon transports and the pod lifecycle client.
"""

from .client import HyperClient
from .retry import RetryPolicy
from .transport import DaemonTransport, LogStream, NullTransport, Transport, create_transport

__all__ = [
    "HyperClient",
    "RetryPolicy",
    "Transport",
    "DaemonTransport",
    "NullTransport",
    "LogStream",
    "create_transport",
]
