"""Request and response models for the peer registry API."""

from typing import List

from pydantic import BaseModel, Field


class PeersResponse(BaseModel):
    """Known peers."""

    peers: List[str] = Field(default_factory=list)


class DiscoverRequest(BaseModel):
    """Peer advertisement from another node."""

    limit: int = Field(1000, ge=1, le=1000, description="Maximum number of peers to return")
    peers: List[str] = Field(..., description="Peers known to the caller")


class DiscoverResponse(BaseModel):
    """Answer to a peer advertisement."""

    name: str = Field(..., description="Implementation name")
    version: str = Field(..., description="Implementation version")
    peers: List[str] = Field(default_factory=list)
