"""Version information for podgate."""

__version__ = "1.0.0"
__implementation__ = "podgate"
