"""Music generation HTTP routes."""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends

from core.providers.registries import ProviderRegistry
from core.pydantic_schemas import ok
from features.dependencies import get_location_resolver, get_provider_registry
from features.music.schemas import MusicGenerateBody
from features.music.service import MusicService
from infrastructure.storage.resolver import MediaLocationResolver

router = APIRouter(prefix="/music", tags=["music"])
logger = logging.getLogger(__name__)


@router.post("/generate")
async def generate_music(
    body: MusicGenerateBody,
    registry: ProviderRegistry = Depends(get_provider_registry),
    resolver: MediaLocationResolver = Depends(get_location_resolver),
) -> Dict[str, Any]:
    logger.info(
        "POST /music/generate received (provider=%s, samples=%d)",
        body.provider or "default",
        body.sample_count,
    )
    result = await MusicService(registry, resolver).generate(body)
    return ok("Music generated", data=result)
