"""Error models and exception classes for the pod gateway."""

import time
from enum import Enum
from typing import Optional, List

from pydantic import BaseModel, ConfigDict, Field


class ErrorType(str, Enum):
    """Error type enumeration."""

    AUTHORIZATION = "authorization"
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    RESOURCE_CONFLICT = "resource_conflict"
    TIMEOUT = "timeout"
    INTERNAL_SERVER = "internal_server"
    SERVICE_UNAVAILABLE = "service_unavailable"
    EXTERNAL_SERVICE = "external_service"


class ErrorDetail(BaseModel):
    """Detailed error information."""

    field: Optional[str] = Field(None, description="Field name for validation errors")
    message: str = Field(..., description="Human-readable error message")
    code: Optional[str] = Field(None, description="Machine-readable error code")


class ErrorResponse(BaseModel):
    """Standardized error response model."""

    model_config = ConfigDict(use_enum_values=True)

    error: str = Field(..., description="Main error message")
    error_type: ErrorType = Field(..., description="Error category")
    details: Optional[List[ErrorDetail]] = Field(
        None, description="Additional error details"
    )
    request_id: Optional[str] = Field(
        None, description="Request identifier for tracking"
    )
    timestamp: float = Field(default_factory=time.time, description="Error timestamp")


# Custom Exception Classes


class GatewayException(Exception):
    """Base exception for the pod gateway."""

    def __init__(
        self,
        message: str,
        error_type: ErrorType = ErrorType.INTERNAL_SERVER,
        status_code: int = 500,
        details: Optional[List[ErrorDetail]] = None,
        request_id: Optional[str] = None,
    ):
        self.message = message
        self.error_type = error_type
        self.status_code = status_code
        self.details = details or []
        self.request_id = request_id
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert exception to error response model."""
        return ErrorResponse(
            error=self.message,
            error_type=self.error_type,
            details=self.details if self.details else None,
            request_id=self.request_id,
        )


class AuthorizationError(GatewayException):
    """Authorization related errors."""

    def __init__(self, message: str = "Access denied", **kwargs):
        super().__init__(
            message=message,
            error_type=ErrorType.AUTHORIZATION,
            status_code=403,
            **kwargs,
        )


# hyperd daemon errors


class HyperError(GatewayException):
    """Base class for failures talking to the hyperd daemon.

    Carries the operation that failed and, where known, the pod id and the
    status code the daemon reported.
    """

    default_message = "hyperd operation failed"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        operation: Optional[str] = None,
        pod_id: Optional[str] = None,
        code: Optional[int] = None,
        error_type: ErrorType = ErrorType.EXTERNAL_SERVICE,
        status_code: int = 502,
        **kwargs,
    ):
        self.operation = operation
        self.pod_id = pod_id
        self.code = code
        super().__init__(
            message=message or self.default_message,
            error_type=error_type,
            status_code=status_code,
            **kwargs,
        )

    def context(self) -> dict:
        """Structured fields for logging."""
        return {
            key: value
            for key, value in (
                ("operation", self.operation),
                ("pod_id", self.pod_id),
                ("code", self.code),
            )
            if value is not None
        }


class DaemonUnreachable(HyperError):
    """The daemon socket could not be dialed or the connection dropped."""

    default_message = "hyperd daemon is unreachable"

    def __init__(self, message: Optional[str] = None, **kwargs):
        kwargs.setdefault("error_type", ErrorType.SERVICE_UNAVAILABLE)
        kwargs.setdefault("status_code", 503)
        super().__init__(message, **kwargs)


class DaemonTimeout(DaemonUnreachable):
    """The daemon did not answer within the call's timeout."""

    default_message = "hyperd daemon timed out"

    def __init__(self, message: Optional[str] = None, **kwargs):
        kwargs.setdefault("error_type", ErrorType.TIMEOUT)
        kwargs.setdefault("status_code", 504)
        super().__init__(message, **kwargs)


class DaemonProtocolError(HyperError):
    """The daemon answered with an error status or an unparseable body."""

    default_message = "Unexpected response from hyperd"

    def __init__(self, message: Optional[str] = None, *, http_status: Optional[int] = None, **kwargs):
        self.http_status = http_status
        super().__init__(message, **kwargs)


class ImagePullFailed(HyperError):
    """Pulling an image through the daemon failed."""

    def __init__(self, image: str, message: Optional[str] = None, **kwargs):
        self.image = image
        kwargs.setdefault("operation", "pull_image")
        super().__init__(message or f"Could not pull image: {image}", **kwargs)


class PodCreateFailed(HyperError):
    """The daemon refused to create a pod."""

    def __init__(self, pod_id: str, code: Optional[int] = None, message: Optional[str] = None, **kwargs):
        kwargs.setdefault("operation", "create_pod")
        kwargs.setdefault("error_type", ErrorType.SERVICE_UNAVAILABLE)
        kwargs.setdefault("status_code", 503)
        super().__init__(
            message or f"Could not create pod: hyper error code={code}",
            pod_id=pod_id,
            code=code,
            **kwargs,
        )


class PodStartFailed(HyperError):
    """Starting a created pod failed; the pod still exists."""

    def __init__(self, pod_id: str, message: Optional[str] = None, **kwargs):
        kwargs.setdefault("operation", "start_pod")
        super().__init__(message or f"Could not start pod: {pod_id}", pod_id=pod_id, **kwargs)


class PodDeleteFailed(HyperError):
    """The daemon refused to delete a pod."""

    def __init__(self, pod_id: str, code: Optional[int] = None, message: Optional[str] = None, **kwargs):
        kwargs.setdefault("operation", "delete_pod")
        kwargs.setdefault("error_type", ErrorType.SERVICE_UNAVAILABLE)
        kwargs.setdefault("status_code", 503)
        super().__init__(
            message or f"Could not delete pod: hyper error code={code}",
            pod_id=pod_id,
            code=code,
            **kwargs,
        )


class PodNetworkUnready(HyperError):
    """The pod has no IP address assigned yet."""

    def __init__(self, pod_id: str, message: Optional[str] = None, **kwargs):
        kwargs.setdefault("operation", "get_pod_ip")
        kwargs.setdefault("error_type", ErrorType.RESOURCE_CONFLICT)
        kwargs.setdefault("status_code", 409)
        super().__init__(message or f"Pod has no IP address yet: {pod_id}", pod_id=pod_id, **kwargs)


class PodProvisionFailed(HyperError):
    """Provisioning a pod failed before it existed on the daemon."""

    def __init__(self, pod_id: str, message: Optional[str] = None, *, pod_exists: bool = False, **kwargs):
        self.pod_exists = pod_exists
        kwargs.setdefault("operation", "run_pod")
        kwargs.setdefault("error_type", ErrorType.SERVICE_UNAVAILABLE)
        kwargs.setdefault("status_code", 503)
        super().__init__(message or f"Could not provision pod: {pod_id}", pod_id=pod_id, **kwargs)


class StreamError(HyperError):
    """A daemon byte stream failed mid-flight."""

    default_message = "hyperd stream failed"
