"""Video generation HTTP routes."""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends

from core.providers.registries import ProviderRegistry
from core.pydantic_schemas import ok
from features.dependencies import get_location_resolver, get_provider_registry
from features.video.schemas import VideoExtendBody, VideoGenerateBody
from features.video.service import VideoService
from infrastructure.storage.resolver import MediaLocationResolver

router = APIRouter(prefix="/video", tags=["video"])
logger = logging.getLogger(__name__)


def _prompt_preview(prompt: str) -> str:
    text = (prompt or "").strip().replace("\n", " ")
    return text[:120] + ("..." if len(text) > 120 else "")


@router.post("/generate")
async def generate_video(
    body: VideoGenerateBody,
    registry: ProviderRegistry = Depends(get_provider_registry),
    resolver: MediaLocationResolver = Depends(get_location_resolver),
) -> Dict[str, Any]:
    """Generate a video from text or image input.

    Blocks until the vendor operation finishes or polling gives up.
    """

    logger.info(
        "POST /video/generate received (provider=%s, prompt='%s', has_image=%s)",
        body.provider or "default",
        _prompt_preview(body.prompt),
        bool(body.image_uri or body.image_base64),
    )
    result = await VideoService(registry, resolver).generate(body)
    return ok("Video generated", data=result)


@router.post("/extend")
async def extend_video(
    body: VideoExtendBody,
    registry: ProviderRegistry = Depends(get_provider_registry),
    resolver: MediaLocationResolver = Depends(get_location_resolver),
) -> Dict[str, Any]:
    """Generate a continuation of an existing video."""

    logger.info(
        "POST /video/extend received (provider=%s, video=%s, prompt='%s')",
        body.provider or "default",
        body.video_uri,
        _prompt_preview(body.prompt),
    )
    result = await VideoService(registry, resolver).extend(body)
    return ok("Video extended", data=result)
