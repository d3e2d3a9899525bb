"""Pod gateway for a local hyperd container runtime."""

from ._version import __implementation__, __version__

__all__ = ["__version__", "__implementation__"]
