"""Request validation performed by the provider base classes."""

import pytest

from core.exceptions import FeatureNotSupportedError, InvalidInputError, ModelNotFoundError
from core.providers.base import BaseImageProvider
from core.providers.capabilities import Feature, ModelInfo
from core.providers.types import (
    ImageGenerateRequest,
    ImageUpscaleRequest,
    MusicRequest,
    Pronunciation,
    SpeechRequest,
    VideoExtendRequest,
    VideoImageRequest,
    VideoTextRequest,
)
from tests.helpers import FakeImageProvider, FakeMusicProvider, FakeSpeechProvider, FakeVideoProvider


class SquareOrWideProvider(BaseImageProvider):
    name = "square_or_wide"
    features = frozenset({Feature.ASPECT_RATIO})
    models = (ModelInfo(id="sq-1", aliases=("square",), aspect_ratios=("1:1", "16:9"), max_prompt_length=20),)
    default_model = "sq-1"

    def __init__(self) -> None:
        self.calls = 0

    async def _generate(self, request, model):
        self.calls += 1
        return []


@pytest.mark.anyio("asyncio")
async def test_unsupported_aspect_ratio_rejected_before_generation():
    provider = SquareOrWideProvider()

    with pytest.raises(InvalidInputError) as excinfo:
        await provider.generate(ImageGenerateRequest(prompt="cat", aspect_ratio="2:1"))

    assert excinfo.value.field == "aspect_ratio"
    assert provider.calls == 0


def test_empty_prompt_checked_before_features_and_model():
    provider = SquareOrWideProvider()
    request = ImageGenerateRequest(prompt="   ", negative_prompt="blurry", model="unknown")

    with pytest.raises(InvalidInputError) as excinfo:
        provider.validate(request)
    assert excinfo.value.field == "prompt"


def test_unsupported_feature_checked_before_model():
    provider = SquareOrWideProvider()
    request = ImageGenerateRequest(prompt="cat", negative_prompt="blurry", model="unknown")

    with pytest.raises(FeatureNotSupportedError) as excinfo:
        provider.validate(request)
    assert excinfo.value.feature == "negative_prompt"


def test_unknown_model_lists_available_ids():
    provider = SquareOrWideProvider()

    with pytest.raises(ModelNotFoundError) as excinfo:
        provider.validate(ImageGenerateRequest(prompt="cat", model="sq-2"))
    assert excinfo.value.available == ["sq-1"]


def test_model_alias_resolution_is_case_insensitive():
    provider = SquareOrWideProvider()

    assert provider.validate(ImageGenerateRequest(prompt="cat", model="SQUARE")).id == "sq-1"


def test_prompt_length_limit():
    provider = SquareOrWideProvider()

    with pytest.raises(InvalidInputError):
        provider.validate(ImageGenerateRequest(prompt="x" * 21))


def test_multiple_samples_require_feature():
    provider = SquareOrWideProvider()

    with pytest.raises(FeatureNotSupportedError):
        provider.validate(ImageGenerateRequest(prompt="cat", number_of_images=2))


def test_video_duration_must_be_listed():
    provider = FakeVideoProvider()

    with pytest.raises(InvalidInputError) as excinfo:
        provider.validate(VideoTextRequest(prompt="waves", duration_seconds=5))
    assert excinfo.value.field == "duration_seconds"


def test_video_audio_requires_model_support():
    provider = FakeVideoProvider()

    with pytest.raises(FeatureNotSupportedError) as excinfo:
        provider.validate(VideoTextRequest(prompt="waves", model="veo-2", generate_audio=True))
    assert excinfo.value.model == "veo-2.0-generate-001"

    model = provider.validate(VideoTextRequest(prompt="waves", model="veo-3", generate_audio=True))
    assert model.supports_audio


def test_image_to_video_rejects_empty_image():
    provider = FakeVideoProvider()

    with pytest.raises(InvalidInputError) as excinfo:
        provider.validate(VideoImageRequest(prompt="waves", image_data=b""))
    assert excinfo.value.field == "image"


@pytest.mark.parametrize(
    ("request_kwargs", "field"),
    [
        ({"speaking_rate": 4.5}, "speaking_rate"),
        ({"speaking_rate": 0.1}, "speaking_rate"),
        ({"pitch": -25.0}, "pitch"),
    ],
)
def test_speech_ranges(request_kwargs, field):
    provider = FakeSpeechProvider()

    with pytest.raises(InvalidInputError) as excinfo:
        provider.validate(SpeechRequest(text="hello", **request_kwargs))
    assert excinfo.value.field == field


def test_speech_pronunciations_need_supported_feature():
    provider = FakeSpeechProvider()
    request = SpeechRequest(text="tomato", pronunciations=(Pronunciation("tomato", "təˈmɑːtoʊ"),))

    with pytest.raises(FeatureNotSupportedError):
        provider.validate(request)


def test_music_sample_count_bounded_by_model():
    provider = FakeMusicProvider()

    assert provider.validate(MusicRequest(prompt="lofi", sample_count=4)).id == "fake-music"
    with pytest.raises(InvalidInputError) as excinfo:
        provider.validate(MusicRequest(prompt="lofi", sample_count=5))
    assert excinfo.value.field == "sample_count"


def test_video_extension_checks_duration_and_source():
    provider = FakeVideoProvider()

    with pytest.raises(InvalidInputError) as excinfo:
        provider.validate(VideoExtendRequest(prompt="keep going", video_uri="gs://b/clip.mp4", duration_seconds=5))
    assert excinfo.value.field == "duration_seconds"

    with pytest.raises(InvalidInputError) as excinfo:
        provider.validate(VideoExtendRequest(prompt="keep going", video_uri="  "))
    assert excinfo.value.field == "video_uri"


class TextOnlyVideoProvider(FakeVideoProvider):
    features = frozenset({Feature.ASPECT_RATIO})


@pytest.mark.anyio("asyncio")
async def test_video_extension_requires_feature():
    provider = TextOnlyVideoProvider()

    with pytest.raises(FeatureNotSupportedError) as excinfo:
        await provider.extend(VideoExtendRequest(prompt="keep going", video_uri="gs://b/clip.mp4"))
    assert excinfo.value.feature == "video_extension"


def test_upscale_factor_defaults_and_normalises():
    provider = FakeImageProvider()

    assert provider.resolve_upscale_factor(None) == "x2"
    assert provider.resolve_upscale_factor(" X4 ") == "x4"
    with pytest.raises(InvalidInputError) as excinfo:
        provider.resolve_upscale_factor("x3")
    assert excinfo.value.field == "upscale_factor"


@pytest.mark.anyio("asyncio")
async def test_upscale_rejects_empty_image_and_unsupported_provider():
    provider = FakeImageProvider()

    with pytest.raises(InvalidInputError) as excinfo:
        await provider.upscale(ImageUpscaleRequest(image_data=b""))
    assert excinfo.value.field == "image"
    assert provider.calls == []

    with pytest.raises(FeatureNotSupportedError):
        await SquareOrWideProvider().upscale(ImageUpscaleRequest(image_data=b"png"))


@pytest.mark.anyio("asyncio")
async def test_voice_catalogue_is_an_advertised_feature():
    silent = FakeSpeechProvider("silent")
    listed = FakeSpeechProvider(voices=[{"name": "Kore", "language_codes": ["en-US"]}])

    assert not silent.supports(Feature.LIST_VOICES)
    assert listed.supports(Feature.LIST_VOICES)
    with pytest.raises(FeatureNotSupportedError) as excinfo:
        await silent.list_voices()
    assert excinfo.value.feature == "list_voices"
