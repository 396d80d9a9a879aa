"""Speech synthesis HTTP routes."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query

from core.providers.registries import ProviderRegistry
from core.pydantic_schemas import ok
from features.dependencies import get_location_resolver, get_provider_registry
from features.speech.schemas import SpeechSynthesizeBody
from features.speech.service import SpeechService
from infrastructure.storage.resolver import MediaLocationResolver

router = APIRouter(prefix="/speech", tags=["speech"])
logger = logging.getLogger(__name__)


@router.post("/synthesize")
async def synthesize_speech(
    body: SpeechSynthesizeBody,
    registry: ProviderRegistry = Depends(get_provider_registry),
    resolver: MediaLocationResolver = Depends(get_location_resolver),
) -> Dict[str, Any]:
    logger.info(
        "POST /speech/synthesize received (provider=%s, voice=%s, chars=%d)",
        body.provider or "default",
        body.voice or "default",
        len(body.text or ""),
    )
    result = await SpeechService(registry, resolver).synthesize(body)
    return ok("Speech synthesized", data=result)


@router.get("/voices")
async def list_voices(
    provider: Optional[str] = Query(None),
    language_code: Optional[str] = Query(None),
    registry: ProviderRegistry = Depends(get_provider_registry),
    resolver: MediaLocationResolver = Depends(get_location_resolver),
) -> Dict[str, Any]:
    """List the voices a speech provider offers."""

    result = await SpeechService(registry, resolver).list_voices(provider, language_code)
    return ok("Voices retrieved", data=result, meta={"count": len(result["voices"])})
