"""Small helpers for inspecting generated media payloads."""

from __future__ import annotations

import base64
import binascii
import io
import logging
import wave
from pathlib import PurePosixPath
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError

from config import storage as storage_config

logger = logging.getLogger(__name__)

_MIME_EXTENSIONS = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/webp": "webp",
    "image/gif": "gif",
    "video/mp4": "mp4",
    "video/webm": "webm",
    "audio/wav": "wav",
    "audio/x-wav": "wav",
    "audio/mpeg": "mp3",
    "audio/ogg": "ogg",
    "audio/flac": "flac",
}


def content_type_for(path: str) -> str:
    """Map a file name or key to its content type by extension."""

    suffix = PurePosixPath(path).suffix.lower().lstrip(".")
    return storage_config.CONTENT_TYPES.get(suffix, storage_config.DEFAULT_CONTENT_TYPE)


def extension_for_mime(mime_type: str, default: str = "bin") -> str:
    return _MIME_EXTENSIONS.get((mime_type or "").split(";")[0].strip().lower(), default)


def decode_base64(value: str, *, field: str = "data") -> bytes:
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError(f"{field} is not valid base64") from exc


def image_dimensions(data: bytes) -> Tuple[Optional[int], Optional[int]]:
    """Return ``(width, height)`` or ``(None, None)`` when Pillow cannot read it."""

    try:
        with Image.open(io.BytesIO(data)) as image:
            return image.width, image.height
    except (UnidentifiedImageError, OSError):
        logger.debug("Could not read image dimensions from %d bytes", len(data))
        return None, None


def wav_properties(data: bytes) -> Tuple[Optional[int], Optional[float]]:
    """Return ``(sample_rate, duration_seconds)`` for a WAV payload."""

    try:
        with wave.open(io.BytesIO(data), "rb") as handle:
            rate = handle.getframerate()
            frames = handle.getnframes()
    except (wave.Error, EOFError):
        return None, None
    if not rate:
        return None, None
    return rate, frames / float(rate)


def pcm_sample_rate(mime_type: str, default: int) -> int:
    """Read ``rate=`` from a raw PCM MIME type such as ``audio/L16;codec=pcm;rate=24000``."""

    for param in (mime_type or "").split(";")[1:]:
        key, _, value = param.partition("=")
        if key.strip().lower() == "rate":
            try:
                return int(value.strip())
            except ValueError:
                logger.debug("Falling back to default sample rate for %s", mime_type)
    return default


def pcm_to_wav(data: bytes, *, sample_rate: int, channels: int = 1) -> bytes:
    """Wrap 16-bit PCM samples in a WAV container."""

    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wav_file:
        wav_file.setnchannels(channels)
        wav_file.setsampwidth(2)
        wav_file.setframerate(sample_rate)
        wav_file.writeframes(data)
    return buffer.getvalue()


__all__ = [
    "content_type_for",
    "decode_base64",
    "extension_for_mime",
    "image_dimensions",
    "pcm_sample_rate",
    "pcm_to_wav",
    "wav_properties",
]
