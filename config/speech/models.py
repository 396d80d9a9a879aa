"""Speech models per provider."""

from __future__ import annotations

from typing import Any, Dict

# Cloud Text-to-Speech exposes voice families rather than models
CLOUD_TTS_MODELS: Dict[str, Dict[str, Any]] = {
    "chirp3-hd": {
        "aliases": ("chirp", "chirp3", "chirp-hd"),
    },
}

CLOUD_TTS_DEFAULT_MODEL = "chirp3-hd"

GEMINI_TTS_MODELS: Dict[str, Dict[str, Any]] = {
    "gemini-2.5-flash-preview-tts": {
        "aliases": ("gemini-tts", "gemini-flash-tts"),
    },
    "gemini-2.5-pro-preview-tts": {
        "aliases": ("gemini-pro-tts",),
    },
}

GEMINI_TTS_DEFAULT_MODEL = "gemini-2.5-flash-preview-tts"

__all__ = ["CLOUD_TTS_DEFAULT_MODEL", "CLOUD_TTS_MODELS", "GEMINI_TTS_DEFAULT_MODEL", "GEMINI_TTS_MODELS"]
