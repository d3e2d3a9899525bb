"""Peer registry.

Keeps the set of peer URIs this node knows about, optionally persisted to a
JSON file so the set survives restarts.
"""

import asyncio
import json
import os
import random
from pathlib import Path
from typing import Iterable, List, Optional
from urllib.parse import urlsplit

import structlog

logger = structlog.get_logger(__name__)

DEFAULT_PEER_LIMIT = 1000


def normalize_peer(peer: str) -> Optional[str]:
    """Normalize a peer URI, returning None when it is not usable.

    A missing scheme defaults to https; scheme and host are lowercased and
    trailing slashes dropped.
    """
    peer = peer.strip()
    if not peer:
        return None
    if "://" not in peer:
        peer = f"https://{peer}"

    try:
        parts = urlsplit(peer)
        # Accessing port validates it
        parts.port
    except ValueError:
        return None

    if parts.scheme.lower() not in ("http", "https") or not parts.hostname:
        return None
    if parts.query or parts.fragment or parts.username or parts.password:
        return None

    return f"{parts.scheme.lower()}://{parts.netloc.lower()}{parts.path.rstrip('/')}"


class PeerDatabase:
    """In-memory set of known peers."""

    def __init__(
        self,
        public_uri: Optional[str] = None,
        bootstrap_peers: Optional[Iterable[str]] = None,
        peers_file: Optional[str] = None,
        max_limit: int = DEFAULT_PEER_LIMIT,
    ):
        self.public_uri = normalize_peer(public_uri) if public_uri else None
        self.peers_file = Path(peers_file) if peers_file else None
        self.max_limit = max_limit
        # dict keeps insertion order
        self._peers: dict[str, None] = {}
        self._bootstrap_peers = list(bootstrap_peers or [])
        self._write_lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._peers)

    def __contains__(self, peer: str) -> bool:
        return normalize_peer(peer) in self._peers

    def load(self) -> None:
        """Load persisted peers and add the bootstrap peers."""
        if self.peers_file and self.peers_file.exists():
            try:
                stored = json.loads(self.peers_file.read_text(encoding="utf-8"))
            except (OSError, ValueError) as e:
                logger.warning("Ignoring unreadable peers file", path=str(self.peers_file), error=str(e))
                stored = []

            if isinstance(stored, list):
                self._add([peer for peer in stored if isinstance(peer, str)])
            else:
                logger.warning("Ignoring malformed peers file", path=str(self.peers_file))

        self._add(self._bootstrap_peers)
        logger.info("Peer database loaded", peers=len(self._peers))

    async def add_peers(self, peers: Iterable[str]) -> int:
        """Add peers, returning how many were new.

        The peers file is rewritten in a worker thread when anything was added.
        """
        added = self._add(peers)
        if added:
            logger.info("Added peers", added=added, total=len(self._peers))
            await self.save()
        return added

    async def save(self) -> None:
        """Write the current peer set to the peers file, off the event loop."""
        if not self.peers_file:
            return

        loop = asyncio.get_running_loop()
        async with self._write_lock:
            snapshot = list(self._peers)
            await loop.run_in_executor(None, self._persist, snapshot)

    def get_peers(self, limit: Optional[int] = None) -> List[str]:
        """Return up to ``limit`` known peers, sampled when more are known."""
        limit = min(limit or self.max_limit, self.max_limit)
        peers = list(self._peers)
        if len(peers) <= limit:
            return peers
        return random.sample(peers, limit)

    def _add(self, peers: Iterable[str]) -> int:
        added = 0
        for peer in peers:
            normalized = normalize_peer(peer)
            if normalized is None:
                logger.debug("Skipping invalid peer", peer=peer)
                continue
            if normalized == self.public_uri or normalized in self._peers:
                continue
            self._peers[normalized] = None
            added += 1
        return added

    def _persist(self, peers: List[str]) -> None:
        try:
            self.peers_file.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.peers_file.with_suffix(self.peers_file.suffix + ".tmp")
            tmp_path.write_text(json.dumps(peers, indent=2), encoding="utf-8")
            os.replace(tmp_path, self.peers_file)
        except OSError as e:
            logger.error("Failed to persist peers", path=str(self.peers_file), error=str(e))
