"""Video model catalogues per provider."""

from __future__ import annotations

from typing import Any, Dict

# Vertex AI Veo models served through ``:predictLongRunning``
VEO_MODELS: Dict[str, Dict[str, Any]] = {
    "veo-2.0-generate-001": {
        "aliases": ("veo-2", "veo-2.0", "veo2"),
        "aspect_ratios": ("16:9", "9:16"),
        "durations": (4, 6, 8),
        "supports_audio": False,
    },
    "veo-3.0-generate-preview": {
        "aliases": ("veo-3", "veo-3.0", "veo3", "veo-3-preview"),
        "aspect_ratios": ("16:9", "9:16"),
        "durations": (4, 6, 8),
        "supports_audio": True,
    },
}

# OpenAI Sora models
SORA_MODELS: Dict[str, Dict[str, Any]] = {
    "sora-2": {
        "aliases": ("sora",),
        "aspect_ratios": ("16:9", "9:16"),
        "durations": (4, 8, 12),
        "supports_audio": True,
    },
    "sora-2-pro": {
        "aliases": ("sora-pro",),
        "aspect_ratios": ("16:9", "9:16"),
        "durations": (4, 8, 12),
        "supports_audio": True,
    },
}

SORA_ASPECT_RATIO_TO_SIZE: Dict[str, str] = {
    "16:9": "1280x720",
    "9:16": "720x1280",
}

__all__ = ["SORA_ASPECT_RATIO_TO_SIZE", "SORA_MODELS", "VEO_MODELS"]
