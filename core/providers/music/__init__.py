"""Music generation providers."""

from .lyria import LyriaProvider

__all__ = ["LyriaProvider"]
