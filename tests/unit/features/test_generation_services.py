"""Tests for the generation services in front of the provider registry."""

import base64

import pytest

from core.exceptions import (
    FeatureNotSupportedError,
    InvalidInputError,
    InvalidLocationError,
    ValidationError,
)
from core.providers.capabilities import Feature
from core.providers.registries import ProviderRegistry
from core.providers.types import ImageUpscaleRequest, VideoExtendRequest, VideoImageRequest
from features.image.schemas import ImageGenerateBody, ImageUpscaleBody
from features.image.service import ImageService
from features.music.schemas import MusicGenerateBody
from features.music.service import MusicService
from features.speech.schemas import SpeechSynthesizeBody
from features.speech.service import SpeechService
from features.video.schemas import VideoExtendBody, VideoGenerateBody
from features.video.service import VideoService
from infrastructure.storage.resolver import MediaLocationResolver
from tests.helpers import (
    FakeImageProvider,
    FakeMusicProvider,
    FakeSpeechProvider,
    FakeVideoProvider,
    MemoryStorageBackend,
)


class StillImageVideoProvider(FakeVideoProvider):
    features = frozenset({Feature.ASPECT_RATIO, Feature.DURATION})


@pytest.fixture
def gcs() -> MemoryStorageBackend:
    return MemoryStorageBackend("gs", {"gs://b/frame.png": b"\x89PNG-frame", "gs://b/clip.mp4": b"mp4"})


@pytest.fixture
def resolver(gcs, tmp_path) -> MediaLocationResolver:
    return MediaLocationResolver({"gs": gcs}, scratch_dir=tmp_path / "scratch")


@pytest.fixture
def registry() -> ProviderRegistry:
    registry = ProviderRegistry()
    registry.register("image", "fake_image", FakeImageProvider(), default=True)
    registry.register("video", "fake_video", FakeVideoProvider(), default=True)
    registry.register("video", "stills", StillImageVideoProvider("stills"))
    registry.register("speech", "fake_speech", FakeSpeechProvider(), default=True)
    registry.register("music", "fake_music", FakeMusicProvider(), default=True)
    return registry


@pytest.mark.anyio("asyncio")
@pytest.mark.parametrize("output_uri", ["http://host/out.png", "s3://bucket/out.png", "gs://bucket"])
async def test_image_destination_checked_before_generation(registry, resolver, output_uri):
    with pytest.raises(InvalidLocationError):
        await ImageService(registry, resolver).generate(ImageGenerateBody(prompt="cat", output_uri=output_uri))

    assert registry.resolve("image").calls == []


@pytest.mark.anyio("asyncio")
async def test_video_destination_checked_before_generation(registry, resolver, gcs):
    body = VideoGenerateBody(prompt="waves", image_uri="gs://b/frame.png", output_uri="http://host/out.mp4")

    with pytest.raises(InvalidLocationError):
        await VideoService(registry, resolver).generate(body)
    assert registry.resolve("video").calls == []
    assert gcs.downloads == 0


@pytest.mark.anyio("asyncio")
async def test_speech_destination_checked_before_synthesis(registry, resolver):
    with pytest.raises(InvalidLocationError):
        await SpeechService(registry, resolver).synthesize(SpeechSynthesizeBody(text="hi", output_uri="ftp://h/a.wav"))

    assert registry.resolve("speech").calls == []


@pytest.mark.anyio("asyncio")
async def test_music_destination_checked_before_generation(registry, resolver):
    with pytest.raises(InvalidLocationError):
        await MusicService(registry, resolver).generate(MusicGenerateBody(prompt="lofi", output_uri="s3://b/a.wav"))

    assert registry.resolve("music").calls == []


@pytest.mark.anyio("asyncio")
async def test_invalid_video_request_rejected_before_frame_download(registry, resolver, gcs):
    body = VideoGenerateBody(prompt="waves", aspect_ratio="2:1", image_uri="gs://b/frame.png")

    with pytest.raises(InvalidInputError) as excinfo:
        await VideoService(registry, resolver).generate(body)
    assert excinfo.value.field == "aspect_ratio"
    assert gcs.downloads == 0


@pytest.mark.anyio("asyncio")
async def test_image_input_needs_provider_support_before_download(registry, resolver, gcs):
    body = VideoGenerateBody(prompt="waves", provider="stills", image_uri="gs://b/frame.png")

    with pytest.raises(FeatureNotSupportedError) as excinfo:
        await VideoService(registry, resolver).generate(body)
    assert excinfo.value.feature == "image_input"
    assert gcs.downloads == 0


@pytest.mark.anyio("asyncio")
async def test_both_image_forms_rejected(registry, resolver, gcs):
    body = VideoGenerateBody(prompt="waves", image_uri="gs://b/frame.png", image_base64="AAAA")

    with pytest.raises(ValidationError):
        await VideoService(registry, resolver).generate(body)
    assert gcs.downloads == 0


@pytest.mark.anyio("asyncio")
async def test_valid_image_to_video_downloads_frame_once(registry, resolver, gcs):
    result = await VideoService(registry, resolver).generate(
        VideoGenerateBody(prompt="waves", image_uri="gs://b/frame.png", duration_seconds=6)
    )

    request = registry.resolve("video").calls[0]
    assert isinstance(request, VideoImageRequest)
    assert request.image_data == b"\x89PNG-frame"
    assert request.image_mime_type == "image/png"
    assert result["mode"] == "image_to_video"
    assert gcs.downloads == 1


@pytest.mark.anyio("asyncio")
async def test_extend_delivers_continuation(registry, resolver, gcs):
    result = await VideoService(registry, resolver).extend(
        VideoExtendBody(prompt="keep flying", video_uri="gs://b/clip.mp4", output_uri="gs://b/out/longer.mp4")
    )

    request = registry.resolve("video").calls[0]
    assert isinstance(request, VideoExtendRequest)
    assert request.video_uri == "gs://b/clip.mp4"
    assert result["mode"] == "extend"
    assert result["videos"][0]["uri"] == "gs://b/out/longer.mp4"
    assert gcs.objects["gs://b/out/longer.mp4"] == b"extended-mp4"


@pytest.mark.anyio("asyncio")
async def test_extend_requires_provider_support(registry, resolver):
    body = VideoExtendBody(prompt="keep flying", video_uri="gs://b/clip.mp4", provider="stills")

    with pytest.raises(FeatureNotSupportedError):
        await VideoService(registry, resolver).extend(body)
    assert registry.resolve("video", "stills").calls == []


@pytest.mark.anyio("asyncio")
async def test_upscale_remote_image(registry, resolver, gcs):
    result = await ImageService(registry, resolver).upscale(
        ImageUpscaleBody(image_uri="gs://b/frame.png", upscale_factor="x4")
    )

    request = registry.resolve("image").calls[0]
    assert isinstance(request, ImageUpscaleRequest)
    assert request.upscale_factor == "x4"
    assert result["upscale_factor"] == "x4"
    assert result["model"] == "fake-upscale"
    assert base64.b64decode(result["images"][0]["data_base64"]) == b"upscaled-\x89PNG-frame"


@pytest.mark.anyio("asyncio")
async def test_upscale_invalid_factor_rejected_before_download(registry, resolver, gcs):
    with pytest.raises(InvalidInputError) as excinfo:
        await ImageService(registry, resolver).upscale(ImageUpscaleBody(image_uri="gs://b/frame.png", upscale_factor="x3"))

    assert excinfo.value.field == "upscale_factor"
    assert gcs.downloads == 0


@pytest.mark.anyio("asyncio")
async def test_upscale_needs_an_image(registry, resolver):
    with pytest.raises(ValidationError) as excinfo:
        await ImageService(registry, resolver).upscale(ImageUpscaleBody())

    assert excinfo.value.field == "image_uri"


@pytest.mark.anyio("asyncio")
async def test_voice_listing_requires_advertised_feature(registry, resolver):
    with pytest.raises(FeatureNotSupportedError) as excinfo:
        await SpeechService(registry, resolver).list_voices()

    assert excinfo.value.feature == "list_voices"
