"""Business logic for image generation and upscaling."""

from __future__ import annotations

import logging
from typing import Any, Dict

from core.exceptions import ValidationError
from core.providers.registries import ProviderRegistry
from core.providers.types import ImageGenerateRequest, ImageUpscaleRequest, MediaKind
from features.delivery import deliver_outputs
from features.image.schemas import ImageGenerateBody, ImageUpscaleBody
from features.media_inputs import check_image_source, load_image
from infrastructure.storage.resolver import MediaLocationResolver

logger = logging.getLogger(__name__)


class ImageService:
    """Coordinate image providers and output storage."""

    def __init__(self, registry: ProviderRegistry, resolver: MediaLocationResolver) -> None:
        self._registry = registry
        self._resolver = resolver

    async def generate(self, body: ImageGenerateBody) -> Dict[str, Any]:
        provider = self._registry.resolve(MediaKind.IMAGE, body.provider)
        if body.output_uri:
            self._resolver.check_destination(body.output_uri)
        request = ImageGenerateRequest(
            prompt=body.prompt,
            negative_prompt=body.negative_prompt,
            model=body.model,
            aspect_ratio=body.aspect_ratio,
            number_of_images=body.number_of_images,
            seed=body.seed,
        )
        outputs = await provider.generate(request)
        model = provider.resolve_model(request.model)
        images = await deliver_outputs(outputs, self._resolver, body.output_uri)
        logger.info("Generated %d image(s) with %s/%s", len(images), provider.name, model.id)
        return {"provider": provider.name, "model": model.id, "images": images}

    async def upscale(self, body: ImageUpscaleBody) -> Dict[str, Any]:
        provider = self._registry.resolve(MediaKind.IMAGE, body.provider)
        if body.output_uri:
            self._resolver.check_destination(body.output_uri)
        if not check_image_source(body.image_uri, body.image_base64):
            raise ValidationError("image_uri or image_base64 is required", field="image_uri")
        factor = provider.resolve_upscale_factor(body.upscale_factor)

        data, mime_type = await load_image(self._resolver, body.image_uri, body.image_base64, body.image_mime_type)
        outputs = await provider.upscale(
            ImageUpscaleRequest(image_data=data, image_mime_type=mime_type, upscale_factor=factor)
        )
        images = await deliver_outputs(outputs, self._resolver, body.output_uri)
        logger.info("Upscaled image %s with %s (%s)", body.image_uri or "inline", provider.name, factor)
        return {
            "provider": provider.name,
            "model": provider.upscale_model,
            "upscale_factor": factor,
            "images": images,
        }
