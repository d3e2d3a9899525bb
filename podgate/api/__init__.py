"""API endpoints for the pod gateway."""

from . import health, peers, pods

__all__ = ["health", "peers", "pods"]
