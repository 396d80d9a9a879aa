"""Video generation configuration defaults."""

from __future__ import annotations

VEO_DEFAULT_MODEL = "veo-3.0-generate-preview"
SORA_DEFAULT_MODEL = "sora-2"

DEFAULT_DURATION = 8  # seconds
DEFAULT_ASPECT_RATIO = "16:9"
DEFAULT_VIDEO_MIME_TYPE = "video/mp4"

# Long-running operation polling schedule; overridden through Settings
LRO_INITIAL_DELAY_SECONDS = 5.0
LRO_BACKOFF_MULTIPLIER = 1.5
LRO_MAX_DELAY_SECONDS = 60.0
LRO_MAX_ATTEMPTS = 120


__all__ = [
    "DEFAULT_ASPECT_RATIO",
    "DEFAULT_DURATION",
    "DEFAULT_VIDEO_MIME_TYPE",
    "LRO_BACKOFF_MULTIPLIER",
    "LRO_INITIAL_DELAY_SECONDS",
    "LRO_MAX_ATTEMPTS",
    "LRO_MAX_DELAY_SECONDS",
    "SORA_DEFAULT_MODEL",
    "VEO_DEFAULT_MODEL",
]
