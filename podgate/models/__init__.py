"""Data models for the pod gateway."""

from .errors import (
    ErrorType,
    ErrorDetail,
    ErrorResponse,
    GatewayException,
    AuthorizationError,
    HyperError,
    DaemonUnreachable,
    DaemonTimeout,
    DaemonProtocolError,
    ImagePullFailed,
    PodCreateFailed,
    PodStartFailed,
    PodDeleteFailed,
    PodNetworkUnready,
    PodProvisionFailed,
    StreamError,
)
from .pod import (
    PodPhase,
    EnvVar,
    VolumeMount,
    Container,
    Volume,
    PodSpec,
    ContainerStatus,
    PodStatus,
    PodInfo,
    PodRunResponse,
    PodIPResponse,
)
from .peers import PeersResponse, DiscoverRequest, DiscoverResponse

__all__ = [
    # Error models
    "ErrorType",
    "ErrorDetail",
    "ErrorResponse",
    "GatewayException",
    "AuthorizationError",
    "HyperError",
    "DaemonUnreachable",
    "DaemonTimeout",
    "DaemonProtocolError",
    "ImagePullFailed",
    "PodCreateFailed",
    "PodStartFailed",
    "PodDeleteFailed",
    "PodNetworkUnready",
    "PodProvisionFailed",
    "StreamError",
    # Pod models
    "PodPhase",
    "EnvVar",
    "VolumeMount",
    "Container",
    "Volume",
    "PodSpec",
    "ContainerStatus",
    "PodStatus",
    "PodInfo",
    "PodRunResponse",
    "PodIPResponse",
    # Peer models
    "PeersResponse",
    "DiscoverRequest",
    "DiscoverResponse",
]
