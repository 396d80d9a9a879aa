"""Tests for the Gemini text-to-speech provider."""

from types import SimpleNamespace

import pytest
from google.genai import errors as genai_errors

from core.exceptions import FeatureNotSupportedError, GenerationFailedError, InvalidInputError, RateLimitError
from core.providers.capabilities import Feature
from core.providers.speech import GeminiTTSProvider
from core.providers.speech.gemini_tts import build_prompt
from core.providers.types import SpeechRequest
from core.utils.media import wav_properties


class FakeModels:
    def __init__(self, response=None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.calls = []

    def generate_content(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.response


def audio_response(data: bytes, mime_type: str = "audio/L16;codec=pcm;rate=24000"):
    part = SimpleNamespace(inline_data=SimpleNamespace(data=data, mime_type=mime_type))
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=[part]))])


@pytest.mark.anyio("asyncio")
async def test_pcm_is_wrapped_as_wav_with_voice_and_style():
    models = FakeModels(audio_response(b"\x00\x00" * 24000))
    provider = GeminiTTSProvider(SimpleNamespace(models=models))

    outputs = await provider.generate(SpeechRequest(text="Good morning", voice="Puck", style="cheerful"))

    assert outputs[0].mime_type == "audio/wav"
    assert wav_properties(outputs[0].data) == (24000, 1.0)
    call = models.calls[0]
    assert call["model"] == "gemini-2.5-flash-preview-tts"
    assert call["contents"] == "Say the following text in a cheerful tone: Good morning"
    assert call["config"].response_modalities == ["AUDIO"]
    assert call["config"].speech_config.voice_config.prebuilt_voice_config.voice_name == "Puck"


@pytest.mark.anyio("asyncio")
async def test_sample_rate_read_from_mime_type():
    models = FakeModels(audio_response(b"\x00\x00" * 16000, "audio/L16;rate=16000"))
    provider = GeminiTTSProvider(SimpleNamespace(models=models))

    outputs = await provider.generate(SpeechRequest(text="hi"))

    assert outputs[0].sample_rate == 16000
    assert models.calls[0]["config"].speech_config.voice_config.prebuilt_voice_config.voice_name == "Kore"


def test_prompt_without_style_is_the_text():
    assert build_prompt(SpeechRequest(text="plain")) == "plain"


@pytest.mark.parametrize(("kwargs", "field"), [({"voice": "Nova"}, "voice"), ({"style": "sarcastic"}, "style")])
def test_unknown_voice_or_style_rejected(kwargs, field):
    provider = GeminiTTSProvider(SimpleNamespace(models=FakeModels()))

    with pytest.raises(InvalidInputError) as excinfo:
        provider.validate(SpeechRequest(text="hello", **kwargs))
    assert excinfo.value.field == field


def test_speaking_rate_not_supported():
    provider = GeminiTTSProvider(SimpleNamespace(models=FakeModels()))

    with pytest.raises(FeatureNotSupportedError):
        provider.validate(SpeechRequest(text="hello", speaking_rate=1.5))


@pytest.mark.anyio("asyncio")
async def test_missing_audio_fails():
    response = SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=[]))])
    provider = GeminiTTSProvider(SimpleNamespace(models=FakeModels(response)))

    with pytest.raises(GenerationFailedError):
        await provider.generate(SpeechRequest(text="hello"))


@pytest.mark.anyio("asyncio")
async def test_quota_error_mapped():
    error = genai_errors.APIError(429, {"error": {"code": 429, "message": "quota", "status": "RESOURCE_EXHAUSTED"}})
    provider = GeminiTTSProvider(SimpleNamespace(models=FakeModels(error=error)))

    with pytest.raises(RateLimitError):
        await provider.generate(SpeechRequest(text="hello"))


@pytest.mark.anyio("asyncio")
async def test_fixed_voice_catalogue():
    provider = GeminiTTSProvider(SimpleNamespace(models=FakeModels()))

    assert provider.supports(Feature.LIST_VOICES)
    voices = await provider.list_voices("fr-FR")
    assert len(voices) == 8
    assert voices[0] == {"name": "Zephyr", "language_codes": ["fr-FR"], "description": "Gemini TTS voice: Zephyr"}
    assert await provider.list_voices("xx-XX") == []
