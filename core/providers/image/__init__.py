"""Image generation providers."""

from .gemini import GeminiImageProvider
from .imagen import ImagenProvider

__all__ = ["GeminiImageProvider", "ImagenProvider"]
