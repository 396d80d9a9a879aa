"""Google Cloud Text-to-Speech provider (Chirp 3 HD voices)."""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional, Sequence
from xml.sax.saxutils import escape, quoteattr

from config import gcp as gcp_config
from config import speech as speech_config
from core.clients.vertex import VertexClient
from core.exceptions import GenerationFailedError
from core.providers.base import BaseSpeechProvider
from core.providers.capabilities import Feature, ModelInfo, models_from_config
from core.providers.types import AudioOutput, Pronunciation, SpeechRequest
from core.utils.media import decode_base64, wav_properties

logger = logging.getLogger(__name__)


def build_ssml(text: str, pronunciations: Sequence[Pronunciation]) -> str:
    """Wrap ``text`` in SSML, replacing whole-word matches with phoneme tags."""

    body = escape(text)
    for item in pronunciations:
        pattern = re.compile(rf"\b{re.escape(escape(item.phrase))}\b")
        tag = (
            f"<phoneme alphabet={quoteattr(item.alphabet)} ph={quoteattr(item.phonetic)}>"
            f"{escape(item.phrase)}</phoneme>"
        )
        body = pattern.sub(lambda _match: tag, body)
    return f"<speak>{body}</speak>"


class CloudTTSProvider(BaseSpeechProvider):
    """Synthesize speech with ``text:synthesize`` as 24 kHz LINEAR16 WAV."""

    name = "cloud_tts"
    features = frozenset({Feature.SPEAKING_RATE, Feature.PITCH, Feature.PRONUNCIATIONS, Feature.LIST_VOICES})
    models = models_from_config(speech_config.CLOUD_TTS_MODELS)
    default_model = speech_config.CLOUD_TTS_DEFAULT_MODEL

    def __init__(self, client: VertexClient, *, base_url: str = gcp_config.TEXT_TO_SPEECH_BASE_URL) -> None:
        self.client = client
        self.base_url = base_url.rstrip("/")

    @staticmethod
    def build_payload(request: SpeechRequest) -> Dict[str, Any]:
        voice_name = request.voice or speech_config.DEFAULT_VOICE
        language_code = request.language_code or speech_config.DEFAULT_LANGUAGE_CODE

        if request.pronunciations:
            synthesis_input: Dict[str, Any] = {"ssml": build_ssml(request.text, request.pronunciations)}
        else:
            synthesis_input = {"text": request.text}

        audio_config: Dict[str, Any] = {
            "audioEncoding": speech_config.AUDIO_ENCODING,
            "sampleRateHertz": speech_config.SAMPLE_RATE_HERTZ,
            "speakingRate": request.speaking_rate if request.speaking_rate is not None else 1.0,
        }
        if request.pitch is not None:
            audio_config["pitch"] = request.pitch

        return {
            "input": synthesis_input,
            "voice": {"languageCode": language_code, "name": voice_name},
            "audioConfig": audio_config,
        }

    async def _generate(self, request: SpeechRequest, model: ModelInfo) -> List[AudioOutput]:
        endpoint = f"{self.base_url}/text:synthesize"
        payload = self.build_payload(request)
        logger.info(
            "Synthesizing speech: voice=%s chars=%s",
            payload["voice"]["name"],
            len(request.text),
        )
        response = await self.client.post_json(endpoint, payload, provider=self.name)

        encoded = response.get("audioContent")
        if not encoded:
            raise GenerationFailedError("Text-to-Speech returned no audio", provider=self.name)
        try:
            data = decode_base64(encoded, field="audioContent")
        except ValueError as exc:
            raise GenerationFailedError(str(exc), provider=self.name, original_error=exc) from exc

        sample_rate, duration = wav_properties(data)
        return [
            AudioOutput(
                data=data,
                mime_type=speech_config.OUTPUT_MIME_TYPE,
                sample_rate=sample_rate or speech_config.SAMPLE_RATE_HERTZ,
                duration_seconds=duration,
            )
        ]

    async def list_voices(self, language_code: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {"languageCode": language_code} if language_code else None
        response = await self.client.get_json(f"{self.base_url}/voices", params=params, provider=self.name)
        voices = []
        for voice in response.get("voices") or []:
            voices.append(
                {
                    "name": voice.get("name"),
                    "language_codes": list(voice.get("languageCodes") or []),
                    "gender": voice.get("ssmlGender"),
                    "natural_sample_rate_hertz": voice.get("naturalSampleRateHertz"),
                }
            )
        return voices


__all__ = ["CloudTTSProvider", "build_ssml"]
