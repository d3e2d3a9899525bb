"""Utility modules for the pod gateway."""

from .logging import setup_logging
from .id_generator import generate_request_id

__all__ = [
    "setup_logging",
    "generate_request_id",
]
