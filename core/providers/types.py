"""Canonical request and output types shared by every media provider.

Requests are immutable once constructed. Each request reports the optional
features it actually uses through ``requested_features()`` so providers can
reject unsupported combinations before any network call is made.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

from core.exceptions import ValidationError
from core.providers.capabilities import Feature


class MediaKind(str, Enum):
    """Closed set of media kinds the registry understands."""

    IMAGE = "image"
    VIDEO = "video"
    SPEECH = "speech"
    MUSIC = "music"

    @classmethod
    def parse(cls, value: "MediaKind | str") -> "MediaKind":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            raise ValidationError(
                f"Unknown media kind '{value}'. Expected one of {[kind.value for kind in cls]}",
                field="kind",
            ) from exc


@dataclass(frozen=True, slots=True)
class ImageGenerateRequest:
    prompt: str
    negative_prompt: Optional[str] = None
    model: Optional[str] = None
    aspect_ratio: Optional[str] = None
    number_of_images: int = 1
    seed: Optional[int] = None

    def requested_features(self) -> frozenset[Feature]:
        features = set()
        if self.negative_prompt:
            features.add(Feature.NEGATIVE_PROMPT)
        if self.aspect_ratio:
            features.add(Feature.ASPECT_RATIO)
        if self.number_of_images > 1:
            features.add(Feature.MULTIPLE_SAMPLES)
        if self.seed is not None:
            features.add(Feature.SEED)
        return frozenset(features)


@dataclass(frozen=True, slots=True)
class VideoTextRequest:
    prompt: str
    negative_prompt: Optional[str] = None
    model: Optional[str] = None
    aspect_ratio: Optional[str] = None
    duration_seconds: Optional[int] = None
    generate_audio: Optional[bool] = None
    seed: Optional[int] = None

    def requested_features(self) -> frozenset[Feature]:
        features = set()
        if self.negative_prompt:
            features.add(Feature.NEGATIVE_PROMPT)
        if self.aspect_ratio:
            features.add(Feature.ASPECT_RATIO)
        if self.duration_seconds is not None:
            features.add(Feature.DURATION)
        if self.generate_audio:
            features.add(Feature.GENERATE_AUDIO)
        if self.seed is not None:
            features.add(Feature.SEED)
        return frozenset(features)


@dataclass(frozen=True, slots=True)
class VideoImageRequest:
    """Image-to-video request; the first frame is passed as raw bytes."""

    prompt: str
    image_data: bytes
    image_mime_type: str = "image/png"
    negative_prompt: Optional[str] = None
    model: Optional[str] = None
    aspect_ratio: Optional[str] = None
    duration_seconds: Optional[int] = None
    generate_audio: Optional[bool] = None
    seed: Optional[int] = None

    def requested_features(self) -> frozenset[Feature]:
        features = {Feature.IMAGE_INPUT}
        if self.negative_prompt:
            features.add(Feature.NEGATIVE_PROMPT)
        if self.aspect_ratio:
            features.add(Feature.ASPECT_RATIO)
        if self.duration_seconds is not None:
            features.add(Feature.DURATION)
        if self.generate_audio:
            features.add(Feature.GENERATE_AUDIO)
        if self.seed is not None:
            features.add(Feature.SEED)
        return frozenset(features)


@dataclass(frozen=True, slots=True)
class VideoExtendRequest:
    """Continue an existing clip; ``video_uri`` names the source video."""

    prompt: str
    video_uri: str
    video_mime_type: str = "video/mp4"
    model: Optional[str] = None
    duration_seconds: Optional[int] = None
    seed: Optional[int] = None

    def requested_features(self) -> frozenset[Feature]:
        features = {Feature.VIDEO_EXTENSION}
        if self.duration_seconds is not None:
            features.add(Feature.DURATION)
        if self.seed is not None:
            features.add(Feature.SEED)
        return frozenset(features)


@dataclass(frozen=True, slots=True)
class ImageUpscaleRequest:
    image_data: bytes
    image_mime_type: str = "image/png"
    upscale_factor: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Pronunciation:
    """Custom pronunciation for a single word in a phonetic alphabet."""

    phrase: str
    phonetic: str
    alphabet: str = "ipa"


@dataclass(frozen=True, slots=True)
class SpeechRequest:
    text: str
    voice: Optional[str] = None
    language_code: Optional[str] = None
    model: Optional[str] = None
    speaking_rate: Optional[float] = None
    pitch: Optional[float] = None
    pronunciations: Tuple[Pronunciation, ...] = ()
    style: Optional[str] = None

    @property
    def prompt(self) -> str:
        return self.text

    def requested_features(self) -> frozenset[Feature]:
        features = set()
        if self.speaking_rate is not None:
            features.add(Feature.SPEAKING_RATE)
        if self.pitch is not None:
            features.add(Feature.PITCH)
        if self.pronunciations:
            features.add(Feature.PRONUNCIATIONS)
        if self.style:
            features.add(Feature.STYLE)
        return frozenset(features)


@dataclass(frozen=True, slots=True)
class MusicRequest:
    prompt: str
    negative_prompt: Optional[str] = None
    model: Optional[str] = None
    sample_count: int = 1
    seed: Optional[int] = None

    def requested_features(self) -> frozenset[Feature]:
        features = set()
        if self.negative_prompt:
            features.add(Feature.NEGATIVE_PROMPT)
        if self.sample_count > 1:
            features.add(Feature.MULTIPLE_SAMPLES)
        if self.seed is not None:
            features.add(Feature.SEED)
        return frozenset(features)


MediaRequest = Union[
    ImageGenerateRequest,
    ImageUpscaleRequest,
    VideoTextRequest,
    VideoImageRequest,
    VideoExtendRequest,
    SpeechRequest,
    MusicRequest,
]


@dataclass(frozen=True, slots=True)
class MediaOutput:
    """Generated artefact; ``uri`` is set when the vendor stored it remotely."""

    data: bytes
    mime_type: str
    uri: Optional[str] = None

    def metadata(self) -> Dict[str, Any]:
        return {"mime_type": self.mime_type, "size_bytes": len(self.data)}


@dataclass(frozen=True, slots=True)
class ImageOutput(MediaOutput):
    width: Optional[int] = None
    height: Optional[int] = None

    def metadata(self) -> Dict[str, Any]:
        payload = MediaOutput.metadata(self)
        if self.width and self.height:
            payload.update(width=self.width, height=self.height)
        return payload


@dataclass(frozen=True, slots=True)
class VideoOutput(MediaOutput):
    duration_seconds: Optional[float] = None

    def metadata(self) -> Dict[str, Any]:
        payload = MediaOutput.metadata(self)
        if self.duration_seconds is not None:
            payload["duration_seconds"] = self.duration_seconds
        return payload


@dataclass(frozen=True, slots=True)
class AudioOutput(MediaOutput):
    sample_rate: Optional[int] = None
    duration_seconds: Optional[float] = None

    def metadata(self) -> Dict[str, Any]:
        payload = MediaOutput.metadata(self)
        if self.sample_rate:
            payload["sample_rate"] = self.sample_rate
        if self.duration_seconds is not None:
            payload["duration_seconds"] = round(self.duration_seconds, 3)
        return payload


__all__ = [
    "AudioOutput",
    "ImageGenerateRequest",
    "ImageOutput",
    "ImageUpscaleRequest",
    "MediaKind",
    "MediaOutput",
    "MediaRequest",
    "MusicRequest",
    "Pronunciation",
    "SpeechRequest",
    "VideoExtendRequest",
    "VideoImageRequest",
    "VideoOutput",
    "VideoTextRequest",
]
