"""Tests for the Cloud Text-to-Speech provider."""

import base64
import io
import json
import wave

import httpx
import pytest

from core.clients.vertex import VertexClient
from core.providers.speech import CloudTTSProvider
from core.providers.speech.cloud_tts import build_ssml
from core.providers.types import Pronunciation, SpeechRequest


def wav_bytes(frames: int = 24000, rate: int = 24000) -> bytes:
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as handle:
        handle.setnchannels(1)
        handle.setsampwidth(2)
        handle.setframerate(rate)
        handle.writeframes(b"\x00\x00" * frames)
    return buffer.getvalue()


def make_provider(token_provider, http_client) -> CloudTTSProvider:
    client = VertexClient(
        project_id="demo-project",
        location="us-central1",
        token_provider=token_provider,
        http_client=http_client,
    )
    return CloudTTSProvider(client, base_url="https://tts.test/v1")


def test_ssml_replaces_whole_words_and_escapes_text():
    ssml = build_ssml("Tom & tomato", [Pronunciation("tomato", "təˈmɑːtoʊ")])

    assert ssml == '<speak>Tom &amp; <phoneme alphabet="ipa" ph="təˈmɑːtoʊ">tomato</phoneme></speak>'


def test_payload_uses_defaults():
    payload = CloudTTSProvider.build_payload(SpeechRequest(text="hello", pitch=2.0))

    assert payload["input"] == {"text": "hello"}
    assert payload["voice"] == {"languageCode": "en-US", "name": "en-US-Chirp3-HD-Achernar"}
    assert payload["audioConfig"] == {
        "audioEncoding": "LINEAR16",
        "sampleRateHertz": 24000,
        "speakingRate": 1.0,
        "pitch": 2.0,
    }


@pytest.mark.anyio("asyncio")
async def test_synthesize_returns_wav_with_duration(token_provider, recording_transport):
    audio = wav_bytes(frames=12000)
    transport, http_client = recording_transport(
        [httpx.Response(200, json={"audioContent": base64.b64encode(audio).decode()})]
    )
    provider = make_provider(token_provider, http_client)

    outputs = await provider.generate(SpeechRequest(text="hello", voice="en-GB-Chirp3-HD-Puck", language_code="en-GB"))

    assert outputs[0].data == audio
    assert outputs[0].sample_rate == 24000
    assert outputs[0].duration_seconds == pytest.approx(0.5)
    assert str(transport.requests[0].url) == "https://tts.test/v1/text:synthesize"
    assert json.loads(transport.requests[0].content)["voice"]["name"] == "en-GB-Chirp3-HD-Puck"


@pytest.mark.anyio("asyncio")
async def test_list_voices_filters_by_language(token_provider, recording_transport):
    transport, http_client = recording_transport(
        [
            httpx.Response(
                200,
                json={
                    "voices": [
                        {
                            "name": "en-US-Chirp3-HD-Achernar",
                            "languageCodes": ["en-US"],
                            "ssmlGender": "FEMALE",
                            "naturalSampleRateHertz": 24000,
                        }
                    ]
                },
            )
        ]
    )
    provider = make_provider(token_provider, http_client)

    voices = await provider.list_voices("en-US")

    assert voices == [
        {
            "name": "en-US-Chirp3-HD-Achernar",
            "language_codes": ["en-US"],
            "gender": "FEMALE",
            "natural_sample_rate_hertz": 24000,
        }
    ]
    assert transport.requests[0].url.params["languageCode"] == "en-US"
