"""Middleware package for the pod gateway."""

from .logging import RequestLoggingMiddleware

__all__ = ["RequestLoggingMiddleware"]
