"""ffmpeg/ffprobe tool settings."""

from __future__ import annotations

import os

FFMPEG_BINARY = os.getenv("FFMPEG_BINARY", "ffmpeg")
FFPROBE_BINARY = os.getenv("FFPROBE_BINARY", "ffprobe")
MEDIA_TOOL_TIMEOUT_SECONDS = 600.0

DEFAULT_MP3_BITRATE = "192k"
DEFAULT_GIF_FPS = 10

__all__ = [
    "DEFAULT_GIF_FPS",
    "DEFAULT_MP3_BITRATE",
    "FFMPEG_BINARY",
    "FFPROBE_BINARY",
    "MEDIA_TOOL_TIMEOUT_SECONDS",
]
