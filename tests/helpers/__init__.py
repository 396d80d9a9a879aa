"""Fakes shared across the unit and API tests."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Sequence

from config import image as image_config
from config import video as video_config
from core.providers.base import (
    BaseImageProvider,
    BaseMusicProvider,
    BaseSpeechProvider,
    BaseVideoProvider,
)
from core.providers.capabilities import Feature, ModelInfo, models_from_config
from core.providers.types import AudioOutput, ImageOutput, VideoOutput
from infrastructure.media_tools import ToolResult
from infrastructure.storage.base import StorageBackend
from infrastructure.storage.locations import RemoteLocation, StorageLocation


class FakeImageProvider(BaseImageProvider):
    features = frozenset(
        {Feature.NEGATIVE_PROMPT, Feature.ASPECT_RATIO, Feature.MULTIPLE_SAMPLES, Feature.SEED, Feature.UPSCALE}
    )
    models = models_from_config(image_config.IMAGEN_MODELS)
    default_model = image_config.IMAGEN_DEFAULT_MODEL
    upscale_model = "fake-upscale"

    def __init__(self, name: str = "fake_image") -> None:
        self.name = name
        self.calls: List = []

    async def _generate(self, request, model: ModelInfo) -> List[ImageOutput]:
        self.calls.append(request)
        return [
            ImageOutput(data=f"image-{index}".encode(), mime_type="image/png")
            for index in range(request.number_of_images)
        ]

    async def _upscale(self, request, factor: str) -> List[ImageOutput]:
        self.calls.append(request)
        return [ImageOutput(data=b"upscaled-" + request.image_data, mime_type="image/png")]


class FakeVideoProvider(BaseVideoProvider):
    features = frozenset(
        {Feature.ASPECT_RATIO, Feature.DURATION, Feature.IMAGE_INPUT, Feature.GENERATE_AUDIO, Feature.VIDEO_EXTENSION}
    )
    models = models_from_config(video_config.VEO_MODELS)
    default_model = video_config.VEO_DEFAULT_MODEL

    def __init__(self, name: str = "fake_video") -> None:
        self.name = name
        self.calls: List = []

    async def _generate(self, request, model: ModelInfo) -> List[VideoOutput]:
        self.calls.append(request)
        return [VideoOutput(data=b"mp4", mime_type="video/mp4", duration_seconds=8.0)]

    async def _extend(self, request, model: ModelInfo) -> List[VideoOutput]:
        self.calls.append(request)
        return [VideoOutput(data=b"extended-mp4", mime_type="video/mp4", duration_seconds=8.0)]


class FakeSpeechProvider(BaseSpeechProvider):
    features = frozenset({Feature.SPEAKING_RATE, Feature.PITCH})
    models = (ModelInfo(id="fake-voice"),)
    default_model = "fake-voice"

    def __init__(self, name: str = "fake_speech", voices: Sequence[Dict] | None = None) -> None:
        self.name = name
        self.calls: List = []
        self._voices = voices
        if voices is not None:
            self.features = self.features | {Feature.LIST_VOICES}

    async def _generate(self, request, model: ModelInfo) -> List[AudioOutput]:
        self.calls.append(request)
        return [AudioOutput(data=b"RIFF", mime_type="audio/wav", sample_rate=24000)]

    async def list_voices(self, language_code=None):
        return [voice for voice in self._voices if not language_code or language_code in voice["language_codes"]]


class FakeMusicProvider(BaseMusicProvider):
    features = frozenset({Feature.MULTIPLE_SAMPLES})
    models = (ModelInfo(id="fake-music", max_samples=4),)
    default_model = "fake-music"

    def __init__(self, name: str = "fake_music") -> None:
        self.name = name
        self.calls: List = []

    async def _generate(self, request, model: ModelInfo) -> List[AudioOutput]:
        self.calls.append(request)
        return [AudioOutput(data=b"RIFF", mime_type="audio/wav") for _ in range(request.sample_count)]


class MemoryStorageBackend(StorageBackend):
    """In-memory object store keyed by ``scheme://bucket/key``."""

    def __init__(self, scheme: str = "gs", objects: Dict[str, bytes] | None = None) -> None:
        self.scheme = scheme
        self.objects: Dict[str, bytes] = dict(objects or {})
        self.content_types: Dict[str, str | None] = {}
        self.fail_downloads = False
        self.downloads = 0
        self.uploads = 0

    async def upload(self, location: StorageLocation, data: bytes, content_type: str | None = None) -> str:
        self.uploads += 1
        self.objects[str(location)] = data
        self.content_types[str(location)] = content_type
        return str(location)

    async def download(self, location: StorageLocation) -> bytes:
        from core.exceptions import StorageNotFoundError, StorageOperationError

        self.downloads += 1
        if self.fail_downloads:
            raise StorageOperationError("download failed", location=str(location), operation="download")
        try:
            return self.objects[str(location)]
        except KeyError as exc:
            raise StorageNotFoundError("missing", location=str(location), operation="download") from exc

    async def exists(self, location: StorageLocation) -> bool:
        return str(location) in self.objects

    async def get_url(self, location: StorageLocation, ttl_seconds: int = 3600) -> str:
        assert isinstance(location, RemoteLocation)
        return f"https://example.test/{location.bucket}/{location.key}?ttl={ttl_seconds}"

    async def delete(self, location: StorageLocation) -> None:
        self.objects.pop(str(location), None)


class FakeMediaToolRunner:
    """Records ffmpeg/ffprobe invocations and writes a placeholder output file."""

    def __init__(self, media_info: Dict | None = None) -> None:
        self.ffmpeg_calls: List[List[str]] = []
        self.ffprobe_calls: List[str] = []
        self.media_info = media_info or {
            "format": {"duration": "4.5", "format_name": "mov,mp4,m4a,3gp,3g2,mj2"},
            "streams": [
                {"index": 0, "codec_type": "video", "codec_name": "h264", "width": 1280, "height": 720},
                {"index": 1, "codec_type": "audio", "codec_name": "aac", "sample_rate": "48000", "channels": 2},
            ],
        }
        self.inputs_seen: List[bytes] = []

    async def run_ffmpeg(self, args: Sequence[str]) -> ToolResult:
        args = list(args)
        self.ffmpeg_calls.append(args)
        for index, arg in enumerate(args[:-1]):
            if arg == "-i":
                source = Path(args[index + 1])
                if source.exists():
                    self.inputs_seen.append(source.read_bytes())
        Path(args[-1]).write_bytes(b"ffmpeg-output")
        return ToolResult(command=("ffmpeg", *args), returncode=0, stdout="", stderr="", duration=0.0)

    async def run_ffprobe(self, path: str) -> Dict:
        self.ffprobe_calls.append(path)
        return self.media_info


__all__ = [
    "FakeImageProvider",
    "FakeMediaToolRunner",
    "FakeMusicProvider",
    "FakeSpeechProvider",
    "FakeVideoProvider",
    "MemoryStorageBackend",
]
