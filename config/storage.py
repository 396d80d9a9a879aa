"""Storage and scratch file settings."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Dict

SCRATCH_DIR = Path(os.getenv("GENMEDIA_SCRATCH_DIR", str(Path(tempfile.gettempdir()) / "genmedia")))
DEFAULT_URL_TTL_SECONDS = int(os.getenv("STORAGE_URL_TTL_SECONDS", "3600"))

DEFAULT_CONTENT_TYPE = "application/octet-stream"

CONTENT_TYPES: Dict[str, str] = {
    "mp3": "audio/mpeg",
    "wav": "audio/wav",
    "ogg": "audio/ogg",
    "flac": "audio/flac",
    "mp4": "video/mp4",
    "webm": "video/webm",
    "mkv": "video/x-matroska",
    "avi": "video/x-msvideo",
    "mov": "video/quicktime",
    "gif": "image/gif",
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
}

__all__ = ["CONTENT_TYPES", "DEFAULT_CONTENT_TYPE", "DEFAULT_URL_TTL_SECONDS", "SCRATCH_DIR"]
