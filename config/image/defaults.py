"""Image generation defaults."""

from __future__ import annotations

IMAGEN_DEFAULT_MODEL = "imagen-4.0-generate-preview-06-06"
GEMINI_DEFAULT_MODEL = "gemini-2.5-flash-image"

DEFAULT_IMAGE_MIME_TYPE = "image/png"

# Imagen upscaling runs on a dedicated model through ``:predict``
IMAGEN_UPSCALE_MODEL = "imagen-4.0-upscale-preview"
UPSCALE_FACTORS = ("x2", "x4")
DEFAULT_UPSCALE_FACTOR = "x2"

__all__ = [
    "DEFAULT_IMAGE_MIME_TYPE",
    "DEFAULT_UPSCALE_FACTOR",
    "GEMINI_DEFAULT_MODEL",
    "IMAGEN_DEFAULT_MODEL",
    "IMAGEN_UPSCALE_MODEL",
    "UPSCALE_FACTORS",
]
