"""Image model catalogues per provider."""

from __future__ import annotations

from typing import Any, Dict

IMAGEN_ASPECT_RATIOS = ("1:1", "3:4", "4:3", "9:16", "16:9")

# Vertex AI Imagen models served through ``:predict``
IMAGEN_MODELS: Dict[str, Dict[str, Any]] = {
    "imagen-3.0-generate-002": {
        "aliases": ("imagen-3", "imagen-3.0", "imagen3"),
        "aspect_ratios": IMAGEN_ASPECT_RATIOS,
        "max_samples": 4,
        "max_prompt_length": 480,
    },
    "imagen-3.0-fast-generate-001": {
        "aliases": ("imagen-3-fast", "imagen-3.0-fast"),
        "aspect_ratios": IMAGEN_ASPECT_RATIOS,
        "max_samples": 4,
        "max_prompt_length": 480,
    },
    "imagen-4.0-generate-preview-06-06": {
        "aliases": ("imagen-4", "imagen-4.0", "imagen4", "imagen-4-preview"),
        "aspect_ratios": IMAGEN_ASPECT_RATIOS,
        "max_samples": 4,
        "max_prompt_length": 2000,
    },
}

# Gemini native image models served through google-genai
GEMINI_IMAGE_MODELS: Dict[str, Dict[str, Any]] = {
    "gemini-2.5-flash-image": {
        "aliases": ("gemini", "gemini-flash", "nano-banana"),
        "aspect_ratios": ("1:1", "2:3", "3:2", "3:4", "4:3", "4:5", "5:4", "9:16", "16:9", "21:9"),
        "max_samples": 1,
    },
}

__all__ = ["GEMINI_IMAGE_MODELS", "IMAGEN_ASPECT_RATIOS", "IMAGEN_MODELS"]
