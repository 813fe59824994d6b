"""Route group exports."""

from . import health, maps

__all__ = ["maps", "health"]
