"""Business logic for text-to-speech."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from core.exceptions import FeatureNotSupportedError
from core.providers.capabilities import Feature
from core.providers.registries import ProviderRegistry
from core.providers.types import MediaKind, Pronunciation, SpeechRequest
from features.delivery import deliver_outputs
from features.speech.schemas import SpeechSynthesizeBody
from infrastructure.storage.resolver import MediaLocationResolver

logger = logging.getLogger(__name__)


class SpeechService:
    def __init__(self, registry: ProviderRegistry, resolver: MediaLocationResolver) -> None:
        self._registry = registry
        self._resolver = resolver

    async def synthesize(self, body: SpeechSynthesizeBody) -> Dict[str, Any]:
        provider = self._registry.resolve(MediaKind.SPEECH, body.provider)
        if body.output_uri:
            self._resolver.check_destination(body.output_uri)
        request = SpeechRequest(
            text=body.text,
            voice=body.voice,
            language_code=body.language_code,
            model=body.model,
            speaking_rate=body.speaking_rate,
            pitch=body.pitch,
            pronunciations=tuple(
                Pronunciation(phrase=item.phrase, phonetic=item.phonetic, alphabet=item.alphabet)
                for item in body.pronunciations
            ),
            style=body.style,
        )
        outputs = await provider.generate(request)
        model = provider.resolve_model(request.model)
        audio = await deliver_outputs(outputs, self._resolver, body.output_uri)
        logger.info("Synthesized %d characters with %s/%s", len(body.text), provider.name, model.id)
        return {"provider": provider.name, "model": model.id, "audio": audio}

    async def list_voices(self, provider_name: Optional[str] = None, language_code: Optional[str] = None) -> Dict[str, Any]:
        provider = self._registry.resolve(MediaKind.SPEECH, provider_name)
        if not provider.supports(Feature.LIST_VOICES):
            raise FeatureNotSupportedError(Feature.LIST_VOICES.value, provider=provider.name)
        voices: List[Dict[str, Any]] = await provider.list_voices(language_code)
        return {"provider": provider.name, "language_code": language_code, "voices": voices}
