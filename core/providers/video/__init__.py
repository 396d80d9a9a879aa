"""Video generation providers."""

from .openai import OpenAIVideoProvider
from .veo import VeoProvider

__all__ = ["OpenAIVideoProvider", "VeoProvider"]
