"""Gemini text-to-speech provider.

Gemini speaks with a fixed set of prebuilt voices. A requested style is
folded into the prompt, and the returned 16-bit PCM is wrapped in a WAV
container before delivery.
"""

from __future__ import annotations

import asyncio
import base64
import logging
from typing import Any, Dict, List, Optional

from google.genai import types  # type: ignore

from config import speech as speech_config
from core.clients.ai import wrap_genai_error
from core.exceptions import GenerationFailedError, InvalidInputError
from core.providers.base import BaseSpeechProvider
from core.providers.capabilities import Feature, ModelInfo, models_from_config
from core.providers.types import AudioOutput, SpeechRequest
from core.utils.media import pcm_sample_rate, pcm_to_wav, wav_properties

logger = logging.getLogger(__name__)


def build_prompt(request: SpeechRequest) -> str:
    if not request.style:
        return request.text
    return speech_config.GEMINI_TTS_STYLE_PROMPT.format(style=request.style, text=request.text)


class GeminiTTSProvider(BaseSpeechProvider):
    name = "gemini_tts"
    features = frozenset({Feature.STYLE, Feature.LIST_VOICES})
    models = models_from_config(speech_config.GEMINI_TTS_MODELS)
    default_model = speech_config.GEMINI_TTS_DEFAULT_MODEL

    def __init__(self, client: Any) -> None:
        self.client = client

    def _check_request(self, request: SpeechRequest, model: ModelInfo) -> None:
        super()._check_request(request, model)
        if request.voice and request.voice not in speech_config.GEMINI_TTS_VOICES:
            raise InvalidInputError(
                f"Invalid voice '{request.voice}'. Available voices: {list(speech_config.GEMINI_TTS_VOICES)}",
                field="voice",
                provider=self.name,
            )
        if request.style and request.style not in speech_config.GEMINI_TTS_STYLES:
            raise InvalidInputError(
                f"Invalid style '{request.style}'. Available styles: {list(speech_config.GEMINI_TTS_STYLES)}",
                field="style",
                provider=self.name,
            )

    @staticmethod
    def build_config(request: SpeechRequest) -> types.GenerateContentConfig:
        voice = request.voice or speech_config.GEMINI_TTS_DEFAULT_VOICE
        return types.GenerateContentConfig(
            response_modalities=["AUDIO"],
            speech_config=types.SpeechConfig(
                voice_config=types.VoiceConfig(
                    prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=voice),
                ),
            ),
        )

    async def _generate(self, request: SpeechRequest, model: ModelInfo) -> List[AudioOutput]:
        logger.info(
            "Synthesizing Gemini speech: model=%s voice=%s style=%s chars=%s",
            model.id,
            request.voice or speech_config.GEMINI_TTS_DEFAULT_VOICE,
            request.style,
            len(request.text),
        )
        try:
            response = await asyncio.to_thread(
                self.client.models.generate_content,
                model=model.id,
                contents=build_prompt(request),
                config=self.build_config(request),
            )
        except Exception as exc:
            logger.error("Gemini speech synthesis error: %s", exc)
            raise wrap_genai_error(exc, "models.generate_content", self.name) from exc

        inline = self._first_inline_audio(response)
        if inline is None:
            raise GenerationFailedError("Gemini returned no audio", provider=self.name)

        data, mime_type = inline
        sample_rate = pcm_sample_rate(mime_type, speech_config.GEMINI_TTS_SAMPLE_RATE_HERTZ)
        wav = pcm_to_wav(data, sample_rate=sample_rate)
        _, duration = wav_properties(wav)
        return [
            AudioOutput(
                data=wav,
                mime_type=speech_config.OUTPUT_MIME_TYPE,
                sample_rate=sample_rate,
                duration_seconds=duration,
            )
        ]

    @staticmethod
    def _first_inline_audio(response: Any) -> Optional[tuple[bytes, str]]:
        for candidate in getattr(response, "candidates", None) or []:
            content = getattr(candidate, "content", None)
            for part in getattr(content, "parts", None) or []:
                inline_data = getattr(part, "inline_data", None)
                if not inline_data or not getattr(inline_data, "data", None):
                    continue
                data = inline_data.data
                if not isinstance(data, bytes):
                    data = base64.b64decode(data)
                return data, getattr(inline_data, "mime_type", None) or ""
        return None

    async def list_voices(self, language_code: Optional[str] = None) -> List[Dict[str, Any]]:
        # Prebuilt voices are multilingual
        if language_code and language_code not in speech_config.GEMINI_TTS_LANGUAGES:
            return []
        languages = [language_code] if language_code else list(speech_config.GEMINI_TTS_LANGUAGES)
        return [
            {"name": voice, "language_codes": languages, "description": f"Gemini TTS voice: {voice}"}
            for voice in speech_config.GEMINI_TTS_VOICES
        ]


__all__ = ["GeminiTTSProvider", "build_prompt"]
