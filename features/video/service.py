"""Business logic for video generation."""

from __future__ import annotations

import logging
from typing import Any, Dict

from core.exceptions import FeatureNotSupportedError
from core.providers.capabilities import Feature
from core.providers.registries import ProviderRegistry
from core.providers.types import MediaKind, VideoExtendRequest, VideoImageRequest, VideoTextRequest
from features.delivery import deliver_outputs
from features.media_inputs import check_image_source, load_image
from features.video.schemas import VideoExtendBody, VideoGenerateBody
from infrastructure.storage.resolver import MediaLocationResolver

logger = logging.getLogger(__name__)


class VideoService:
    """Coordinate video providers, input images, and output storage."""

    def __init__(self, registry: ProviderRegistry, resolver: MediaLocationResolver) -> None:
        self._registry = registry
        self._resolver = resolver

    async def generate(self, body: VideoGenerateBody) -> Dict[str, Any]:
        provider = self._registry.resolve(MediaKind.VIDEO, body.provider)
        if body.output_uri:
            self._resolver.check_destination(body.output_uri)

        common = dict(
            prompt=body.prompt,
            negative_prompt=body.negative_prompt,
            model=body.model,
            aspect_ratio=body.aspect_ratio,
            duration_seconds=body.duration_seconds,
            generate_audio=body.generate_audio,
            seed=body.seed,
        )
        # Everything except the frame itself is checked before the frame is fetched
        has_image = check_image_source(body.image_uri, body.image_base64)
        provider.validate(VideoTextRequest(**common))
        if has_image and not provider.supports(Feature.IMAGE_INPUT):
            raise FeatureNotSupportedError(Feature.IMAGE_INPUT.value, provider=provider.name)

        image = await load_image(self._resolver, body.image_uri, body.image_base64, body.image_mime_type)
        if image is None:
            request = VideoTextRequest(**common)
        else:
            request = VideoImageRequest(image_data=image[0], image_mime_type=image[1], **common)

        outputs = await provider.generate(request)
        model = provider.resolve_model(request.model)
        videos = await deliver_outputs(outputs, self._resolver, body.output_uri)
        logger.info(
            "Generated %d video(s) with %s/%s (mode=%s)",
            len(videos),
            provider.name,
            model.id,
            "image" if image else "text",
        )
        return {
            "provider": provider.name,
            "model": model.id,
            "mode": "image_to_video" if image else "text_to_video",
            "videos": videos,
        }

    async def extend(self, body: VideoExtendBody) -> Dict[str, Any]:
        provider = self._registry.resolve(MediaKind.VIDEO, body.provider)
        if body.output_uri:
            self._resolver.check_destination(body.output_uri)

        request = VideoExtendRequest(
            prompt=body.prompt,
            video_uri=body.video_uri,
            video_mime_type=body.video_mime_type,
            model=body.model,
            duration_seconds=body.duration_seconds,
            seed=body.seed,
        )
        outputs = await provider.extend(request)
        model = provider.resolve_model(request.model)
        videos = await deliver_outputs(outputs, self._resolver, body.output_uri)
        logger.info("Extended %s into %d video(s) with %s/%s", body.video_uri, len(videos), provider.name, model.id)
        return {"provider": provider.name, "model": model.id, "mode": "extend", "videos": videos}
