"""Speech synthesis providers."""

from .cloud_tts import CloudTTSProvider
from .gemini_tts import GeminiTTSProvider

__all__ = ["CloudTTSProvider", "GeminiTTSProvider"]
