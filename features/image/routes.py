"""Image generation HTTP routes."""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends

from core.providers.registries import ProviderRegistry
from core.pydantic_schemas import ok
from features.dependencies import get_location_resolver, get_provider_registry
from features.image.schemas import ImageGenerateBody, ImageUpscaleBody
from features.image.service import ImageService
from infrastructure.storage.resolver import MediaLocationResolver

router = APIRouter(prefix="/image", tags=["image"])
logger = logging.getLogger(__name__)


def _prompt_preview(prompt: str) -> str:
    text = (prompt or "").strip().replace("\n", " ")
    return text[:120] + ("..." if len(text) > 120 else "")


@router.post("/generate")
async def generate_image(
    body: ImageGenerateBody,
    registry: ProviderRegistry = Depends(get_provider_registry),
    resolver: MediaLocationResolver = Depends(get_location_resolver),
) -> Dict[str, Any]:
    """Generate one or more images from a text prompt."""

    logger.info(
        "POST /image/generate received (provider=%s, model=%s, prompt='%s')",
        body.provider or "default",
        body.model or "default",
        _prompt_preview(body.prompt),
    )
    result = await ImageService(registry, resolver).generate(body)
    return ok("Image generated", data=result)


@router.post("/upscale")
async def upscale_image(
    body: ImageUpscaleBody,
    registry: ProviderRegistry = Depends(get_provider_registry),
    resolver: MediaLocationResolver = Depends(get_location_resolver),
) -> Dict[str, Any]:
    """Upscale an image by a factor of two or four."""

    logger.info(
        "POST /image/upscale received (provider=%s, factor=%s, source=%s)",
        body.provider or "default",
        body.upscale_factor or "default",
        body.image_uri or "inline",
    )
    result = await ImageService(registry, resolver).upscale(body)
    return ok("Image upscaled", data=result)
