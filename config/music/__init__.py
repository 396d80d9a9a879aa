"""Music generation configuration."""

from __future__ import annotations

from typing import Any, Dict

# Vertex AI Lyria models served through ``:predict``
LYRIA_MODELS: Dict[str, Dict[str, Any]] = {
    "lyria-002": {
        "aliases": ("lyria", "lyria-1", "lyria-1.0", "music-generation"),
        "max_samples": 4,
    },
}

LYRIA_DEFAULT_MODEL = "lyria-002"
OUTPUT_MIME_TYPE = "audio/wav"

__all__ = ["LYRIA_DEFAULT_MODEL", "LYRIA_MODELS", "OUTPUT_MIME_TYPE"]
