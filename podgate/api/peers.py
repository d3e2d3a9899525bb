"""Peer registry endpoints."""

import structlog
from fastapi import APIRouter, Query

from .._version import __implementation__, __version__
from ..dependencies.services import PeerDatabaseDep, SelfTestServiceDep
from ..models.errors import AuthorizationError
from ..models.peers import DiscoverRequest, DiscoverResponse, PeersResponse

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.get("/peers", response_model=PeersResponse, summary="List known peers")
async def get_peers(
    peer_db: PeerDatabaseDep,
    limit: int = Query(1000, ge=1, le=1000, description="Maximum number of peers to return"),
):
    """Return up to ``limit`` peers this node knows about."""
    return PeersResponse(peers=peer_db.get_peers(limit))


@router.post("/peers/discover", response_model=DiscoverResponse, summary="Exchange peers")
async def discover_peers(
    request: DiscoverRequest,
    peer_db: PeerDatabaseDep,
    self_test: SelfTestServiceDep,
):
    """Accept peers advertised by another node and answer with our own.

    Rejected while the node's self-test has not passed.
    """
    if not self_test.self_test_success:
        raise AuthorizationError("This host is misconfigured.")

    added = await peer_db.add_peers(request.peers)
    logger.info("Peer discovery request", received=len(request.peers), added=added)

    return DiscoverResponse(
        name=__implementation__,
        version=__version__,
        peers=peer_db.get_peers(request.limit),
    )
