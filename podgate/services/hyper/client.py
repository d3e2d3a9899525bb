"""Pod lifecycle client for the hyperd daemon.

Turns a PodSpec into the daemon calls that provision it (image pulls, pod
creation, pod start) and tear it down, and classifies every daemon failure
into the gateway's error types. The client keeps no pod state: every read
goes back to the daemon.
"""

import time
from typing import Any, Dict, Optional

import structlog
from pydantic import ValidationError as PydanticValidationError

from ...config.hyper import HyperConfig
from ...models.errors import (
    DaemonProtocolError,
    HyperError,
    ImagePullFailed,
    PodCreateFailed,
    PodDeleteFailed,
    PodNetworkUnready,
    PodProvisionFailed,
    PodStartFailed,
)
from ...models.pod import PodInfo, PodSpec
from .retry import NO_RETRY, RetryPolicy
from .transport import LogStream, NullTransport, Transport, create_transport

logger = structlog.get_logger(__name__)


def _elapsed_ms(start: float) -> float:
    return round((time.monotonic() - start) * 1000, 2)


def _annotate(exc: HyperError, operation: str, pod_id: Optional[str] = None) -> HyperError:
    """Attach client-level context to an error raised by the transport."""
    exc.operation = operation
    if pod_id is not None and exc.pod_id is None:
        exc.pod_id = pod_id
    return exc


def _result_code(data: Any, operation: str, pod_id: str) -> int:
    """Extract the ``Code`` field of a mutating call's result."""
    if not isinstance(data, dict) or not isinstance(data.get("Code"), int):
        raise DaemonProtocolError(
            f"hyperd returned no result code for {operation}",
            operation=operation,
            pod_id=pod_id,
        )
    return data["Code"]


class HyperClient:
    """Drives pod lifecycle operations against hyperd.

    All daemon I/O goes through the injected transport. Dry-run mode is a
    ``NullTransport`` chosen at construction, so each operation below runs the
    same logic in both modes.
    """

    def __init__(
        self,
        transport: Transport,
        retry_policy: RetryPolicy = NO_RETRY,
        create_timeout: Optional[float] = None,
        pull_timeout: Optional[float] = None,
        repull_on_create_failure: bool = False,
    ):
        """Initialize the client.

        Args:
            transport: Daemon transport (DaemonTransport or NullTransport)
            retry_policy: Retry policy for pod info reads and image pulls
            create_timeout: Timeout for pod creation (None = transport default)
            pull_timeout: Timeout for a single image pull (None = transport default)
            repull_on_create_failure: Pull images and retry create once after a failure
        """
        self._transport = transport
        self._retry = retry_policy
        self._create_timeout = create_timeout
        self._pull_timeout = pull_timeout
        self._repull_on_create_failure = repull_on_create_failure

    @classmethod
    def from_config(cls, config: HyperConfig) -> "HyperClient":
        """Build a client and its transport from configuration."""
        return cls(
            create_transport(config),
            retry_policy=RetryPolicy(
                attempts=config.retry_attempts,
                backoff_seconds=config.retry_backoff,
                max_backoff_seconds=config.retry_max_backoff,
            ),
            create_timeout=config.create_timeout,
            pull_timeout=config.pull_timeout,
            repull_on_create_failure=config.repull_on_create_failure,
        )

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def noop(self) -> bool:
        """Whether the client runs in dry-run mode."""
        return isinstance(self._transport, NullTransport)

    async def close(self) -> None:
        """Close the transport."""
        await self._transport.aclose()

    # Introspection

    async def get_daemon_info(self) -> Dict[str, Any]:
        """Fetch the daemon's ``/info`` document."""
        try:
            data = await self._transport.request("GET", "/info")
        except HyperError as e:
            raise _annotate(e, "get_daemon_info")
        return data if isinstance(data, dict) else {}

    async def get_pod_info(self, pod_id: str) -> PodInfo:
        """Fetch the daemon's current view of a pod."""
        logger.debug("Fetching pod info", pod_id=pod_id)
        try:
            data = await self._retry.run(
                "get_pod_info",
                lambda: self._transport.request("GET", "/pod/info", params={"podName": pod_id}),
            )
        except HyperError as e:
            raise _annotate(e, "get_pod_info", pod_id)

        if not isinstance(data, dict):
            raise DaemonProtocolError(
                "hyperd returned an unexpected pod info body",
                operation="get_pod_info",
                pod_id=pod_id,
            )
        try:
            return PodInfo.model_validate(data)
        except PydanticValidationError as e:
            raise DaemonProtocolError(
                f"hyperd returned a malformed pod info body: {e.error_count()} invalid fields",
                operation="get_pod_info",
                pod_id=pod_id,
            ) from e

    async def get_pod_ip(self, pod_id: str) -> str:
        """Return the pod's address, taken from its first CIDR entry.

        Raises:
            PodNetworkUnready: the daemon has not assigned an address yet
        """
        info = await self.get_pod_info(pod_id)
        if not info.status.pod_ip:
            logger.info("Pod has no IP address yet", pod_id=pod_id, phase=info.status.phase)
            raise PodNetworkUnready(pod_id)

        cidr = info.status.pod_ip[0]
        return cidr.split("/", 1)[0]

    # Images

    async def pull_image(self, image: str) -> None:
        """Pull one image through the daemon."""
        logger.info("Pulling image", image=image)
        start = time.monotonic()
        try:
            await self._retry.run(
                "pull_image",
                lambda: self._transport.request(
                    "POST",
                    "/image/create",
                    params={"imageName": image},
                    timeout=self._pull_timeout,
                    parse=False,
                ),
            )
        except HyperError as e:
            logger.error("Image pull failed", image=image, elapsed_ms=_elapsed_ms(start), error=str(e))
            raise ImagePullFailed(
                image,
                f"Could not pull image {image}: {e.message}",
                error_type=e.error_type,
                status_code=e.status_code,
            ) from e

        logger.info("Pulled image", image=image, elapsed_ms=_elapsed_ms(start))

    async def pull_images(self, spec: PodSpec) -> None:
        """Pull every container image in spec order, stopping at the first failure.

        Images pulled before a failure stay cached on the daemon.
        """
        for image in spec.images:
            try:
                await self.pull_image(image)
            except ImagePullFailed as e:
                e.pod_id = spec.id
                raise

    # Pod lifecycle

    async def create_pod(self, spec: PodSpec) -> None:
        """Create a pod from its spec.

        Raises:
            PodCreateFailed: the daemon answered with a non-zero code
        """
        logger.info("Creating pod", pod_id=spec.id, containers=len(spec.containers))
        start = time.monotonic()
        try:
            data = await self._transport.request(
                "POST",
                "/pod/create",
                json=spec.to_daemon_payload(),
                timeout=self._create_timeout,
            )
        except HyperError as e:
            raise _annotate(e, "create_pod", spec.id)

        code = _result_code(data, "create_pod", spec.id)
        if code != 0:
            cause = data.get("Cause") or None
            logger.error("Pod creation failed", pod_id=spec.id, code=code, cause=cause, elapsed_ms=_elapsed_ms(start))
            message = f"Could not create pod: hyper error code={code}"
            if cause:
                message += f" ({cause})"
            raise PodCreateFailed(spec.id, code, message)

        logger.info("Created pod", pod_id=spec.id, elapsed_ms=_elapsed_ms(start))

    async def start_pod(self, pod_id: str) -> None:
        """Start a created pod.

        Only transport-level failures are reported; the daemon's answer is
        not inspected further.
        """
        logger.info("Starting pod", pod_id=pod_id)
        try:
            await self._transport.request("POST", "/pod/start", params={"podId": pod_id}, parse=False)
        except HyperError as e:
            logger.error("Pod start failed", pod_id=pod_id, error=str(e))
            raise PodStartFailed(
                pod_id,
                f"Could not start pod {pod_id}: {e.message}",
                error_type=e.error_type,
                status_code=e.status_code,
            ) from e

    async def delete_pod(self, pod_id: str) -> None:
        """Delete a pod. No further calls should reference it afterwards.

        Raises:
            PodDeleteFailed: the daemon answered with a non-zero code
        """
        logger.info("Deleting pod", pod_id=pod_id)
        try:
            data = await self._transport.request("DELETE", "/pod", params={"podId": pod_id})
        except HyperError as e:
            raise _annotate(e, "delete_pod", pod_id)

        code = _result_code(data, "delete_pod", pod_id)
        if code != 0:
            logger.error("Pod deletion failed", pod_id=pod_id, code=code)
            raise PodDeleteFailed(pod_id, code)

        logger.info("Deleted pod", pod_id=pod_id)

    async def run_pod(self, spec: PodSpec) -> None:
        """Create a pod, then start it.

        A failed creation is raised as ``PodProvisionFailed`` and the pod is
        never started. A failed start raises ``PodStartFailed``; the created
        pod is left in place for the caller to inspect or delete.
        """
        try:
            await self._create_pod_with_fallback(spec)
        except HyperError as e:
            logger.error("Pod provisioning failed", pod_id=spec.id, cause=type(e).__name__, error=str(e))
            raise PodProvisionFailed(
                spec.id,
                f"Could not provision pod {spec.id}: {e.message}",
                code=e.code,
                pod_exists=False,
            ) from e

        await self.start_pod(spec.id)
        logger.info("Pod running", pod_id=spec.id)

    async def _create_pod_with_fallback(self, spec: PodSpec) -> None:
        try:
            await self.create_pod(spec)
        except HyperError as e:
            if not self._repull_on_create_failure:
                raise
            logger.warning("Pulling images after failed pod creation", pod_id=spec.id, error=str(e))
            await self.pull_images(spec)
            await self.create_pod(spec)

    # Logs

    async def get_log(self, container_id: str, follow: bool = False) -> LogStream:
        """Open a container's combined stdout/stderr log stream.

        Args:
            container_id: Daemon container identifier
            follow: Keep the stream open and tail new output

        Returns:
            LogStream; close it to drop the connection early.
        """
        logger.info("Attaching to container logs", container_id=container_id, follow=follow)
        try:
            return await self._transport.open_stream(
                "/container/logs",
                params={
                    "container": container_id,
                    "stdout": True,
                    "stderr": True,
                    "follow": follow,
                },
                tail=follow,
            )
        except HyperError as e:
            logger.error("Failed to attach to container", container_id=container_id, error=str(e))
            raise _annotate(e, "get_log")
