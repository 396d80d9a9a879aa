"""Business logic for music generation."""

from __future__ import annotations

import logging
from typing import Any, Dict

from core.providers.registries import ProviderRegistry
from core.providers.types import MediaKind, MusicRequest
from features.delivery import deliver_outputs
from features.music.schemas import MusicGenerateBody
from infrastructure.storage.resolver import MediaLocationResolver

logger = logging.getLogger(__name__)


class MusicService:
    def __init__(self, registry: ProviderRegistry, resolver: MediaLocationResolver) -> None:
        self._registry = registry
        self._resolver = resolver

    async def generate(self, body: MusicGenerateBody) -> Dict[str, Any]:
        provider = self._registry.resolve(MediaKind.MUSIC, body.provider)
        if body.output_uri:
            self._resolver.check_destination(body.output_uri)
        request = MusicRequest(
            prompt=body.prompt,
            negative_prompt=body.negative_prompt,
            model=body.model,
            sample_count=body.sample_count,
            seed=body.seed,
        )
        outputs = await provider.generate(request)
        model = provider.resolve_model(request.model)
        tracks = await deliver_outputs(outputs, self._resolver, body.output_uri)
        logger.info("Generated %d track(s) with %s/%s", len(tracks), provider.name, model.id)
        return {"provider": provider.name, "model": model.id, "tracks": tracks}
