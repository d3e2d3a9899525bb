"""Pod lifecycle endpoints.

Thin HTTP wrappers over HyperClient. Daemon failures propagate as
HyperError subclasses and are rendered by the global exception handler.
"""

import structlog
from fastapi import APIRouter, Query, Response, status
from fastapi.responses import StreamingResponse

from ..dependencies.services import HyperClientDep
from ..models.errors import StreamError
from ..models.pod import PodInfo, PodIPResponse, PodRunResponse, PodSpec
from ..services.hyper import LogStream

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post(
    "/pods",
    response_model=PodRunResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Provision and start a pod",
)
async def run_pod(
    spec: PodSpec,
    hyper_client: HyperClientDep,
    pull: bool = Query(False, description="Pull the pod's images before creating it"),
):
    """Create and start a pod from its spec."""
    if pull:
        await hyper_client.pull_images(spec)
    await hyper_client.run_pod(spec)
    return PodRunResponse(id=spec.id)


@router.get("/pods/{pod_id}", response_model=PodInfo, summary="Get pod info")
async def get_pod_info(pod_id: str, hyper_client: HyperClientDep):
    """Return the daemon's current view of a pod."""
    return await hyper_client.get_pod_info(pod_id)


@router.get("/pods/{pod_id}/ip", response_model=PodIPResponse, summary="Get pod IP")
async def get_pod_ip(pod_id: str, hyper_client: HyperClientDep):
    """Return the pod's IP address (409 while none is assigned)."""
    ip = await hyper_client.get_pod_ip(pod_id)
    return PodIPResponse(id=pod_id, ip=ip)


@router.delete(
    "/pods/{pod_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a pod",
)
async def delete_pod(pod_id: str, hyper_client: HyperClientDep):
    """Delete a pod."""
    await hyper_client.delete_pod(pod_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


async def _relay(stream: LogStream, container_id: str):
    try:
        async for chunk in stream:
            yield chunk
    except StreamError as e:
        # Headers are already sent; the client sees a truncated body
        logger.warning("Log stream ended early", container_id=container_id, error=e.message)
    finally:
        await stream.aclose()


@router.get("/containers/{container_id}/logs", summary="Stream container logs")
async def get_container_logs(
    container_id: str,
    hyper_client: HyperClientDep,
    follow: bool = Query(False, description="Keep streaming new output"),
):
    """Stream a container's stdout and stderr."""
    stream = await hyper_client.get_log(container_id, follow=follow)
    return StreamingResponse(
        _relay(stream, container_id),
        media_type="application/octet-stream",
    )
