"""Google Gemini native image generation provider."""

from __future__ import annotations

import asyncio
import base64
import logging
from typing import Any, Iterable, List, Sequence

from google.genai import types  # type: ignore

from config import image as image_config
from core.clients.ai import wrap_genai_error
from core.exceptions import GenerationFailedError
from core.providers.base import BaseImageProvider
from core.providers.capabilities import Feature, ModelInfo, models_from_config
from core.providers.types import ImageGenerateRequest, ImageOutput
from core.utils.media import image_dimensions

logger = logging.getLogger(__name__)


class GeminiImageProvider(BaseImageProvider):
    """Generate images using Gemini Flash image models through google-genai."""

    name = "gemini"
    features = frozenset({Feature.ASPECT_RATIO})
    models = models_from_config(image_config.GEMINI_IMAGE_MODELS)
    default_model = image_config.GEMINI_DEFAULT_MODEL

    def __init__(self, client: Any) -> None:
        self.client = client

    async def _generate(self, request: ImageGenerateRequest, model: ModelInfo) -> List[ImageOutput]:
        config = types.GenerateContentConfig(
            response_modalities=["IMAGE"],
            image_config=types.ImageConfig(aspect_ratio=request.aspect_ratio) if request.aspect_ratio else None,
        )

        logger.info(
            "Generating Gemini Flash image with model=%s aspect_ratio=%s",
            model.id,
            request.aspect_ratio,
        )

        try:
            response = await asyncio.to_thread(
                self.client.models.generate_content,
                model=model.id,
                contents=[request.prompt],
                config=config,
            )
        except Exception as exc:
            logger.error("Gemini Flash image generation error: %s", exc)
            raise wrap_genai_error(exc, "models.generate_content", self.name) from exc

        outputs = [
            self._to_output(data, mime_type) for data, mime_type in self._extract_inline_images(response)
        ]
        if outputs:
            return outputs

        text_content = self._extract_text_from_response(response)
        if text_content:
            logger.warning("Gemini returned text instead of image: %s", text_content[:500])
            raise GenerationFailedError(
                f"Gemini returned text instead of image: {text_content[:200]}",
                provider=self.name,
            )
        raise GenerationFailedError("Gemini image response missing data", provider=self.name)

    @staticmethod
    def _to_output(data: bytes, mime_type: str) -> ImageOutput:
        width, height = image_dimensions(data)
        return ImageOutput(data=data, mime_type=mime_type, width=width, height=height)

    def _extract_inline_images(self, response: Any) -> List[tuple[bytes, str]]:
        """Collect inline image parts from a generate_content response."""

        images: List[tuple[bytes, str]] = []
        for part in self._iter_response_parts(response):
            inline_data = getattr(part, "inline_data", None)
            if not inline_data or not getattr(inline_data, "data", None):
                continue
            data = inline_data.data
            if not isinstance(data, bytes):
                data = base64.b64decode(data)
            mime_type = getattr(inline_data, "mime_type", None) or image_config.DEFAULT_IMAGE_MIME_TYPE
            images.append((data, mime_type))
        return images

    def _extract_text_from_response(self, response: Any) -> str | None:
        text_parts = [part.text for part in self._iter_response_parts(response) if getattr(part, "text", None)]
        return " ".join(text_parts) if text_parts else None

    @staticmethod
    def _iter_response_parts(response: Any) -> Iterable[Any]:
        """Yield content parts from a Gemini generate_content response."""

        parts: Sequence[Any] | None = getattr(response, "parts", None)
        if parts:
            yield from parts
            return

        candidates = getattr(response, "candidates", None)
        if not candidates:
            return

        for candidate in candidates:
            content = getattr(candidate, "content", None)
            candidate_parts: Sequence[Any] | None = getattr(content, "parts", None)
            if candidate_parts:
                yield from candidate_parts


__all__ = ["GeminiImageProvider"]
