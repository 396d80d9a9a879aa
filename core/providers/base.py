"""Base Provider Interfaces - Abstract Contracts for All Media Providers
This module defines the abstract base classes that every media provider
implementation follows. The interfaces keep vendor wire formats out of the
services: callers build canonical requests, providers translate them.
Design Pattern:
    - One abstract base per media kind (image, video, speech, music)
    - ``generate()`` is concrete: validate first, then call ``_generate()``
    - Providers advertise optional features and models through a descriptor
Validation Order:
    1. Empty prompt/text -> InvalidInputError
    2. Optional features the provider lacks -> FeatureNotSupportedError
    3. Unknown model name or alias -> ModelNotFoundError
    4. Kind-specific limits (aspect ratio, duration, sample count, ranges)
No vendor call happens until every check has passed.
See Also:
    - core/providers/registries.py: ProviderRegistry
    - core/providers/capabilities.py: Feature, ModelInfo, ProviderDescriptor
    - core/providers/types.py: canonical requests and outputs
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, FrozenSet, Generic, List, Optional, Tuple, TypeVar

from config import image as image_config
from config import speech as speech_config
from core.exceptions import FeatureNotSupportedError, InvalidInputError, ModelNotFoundError, ProviderError
from core.providers.capabilities import Feature, ModelInfo, ProviderDescriptor
from core.providers.types import (
    AudioOutput,
    ImageGenerateRequest,
    ImageOutput,
    ImageUpscaleRequest,
    MediaKind,
    MediaOutput,
    MusicRequest,
    SpeechRequest,
    VideoExtendRequest,
    VideoImageRequest,
    VideoOutput,
    VideoTextRequest,
)

logger = logging.getLogger(__name__)

RequestT = TypeVar("RequestT")
OutputT = TypeVar("OutputT", bound=MediaOutput)


class BaseProvider(ABC, Generic[RequestT, OutputT]):
    """Shared behaviour for every media provider."""

    kind: MediaKind
    name: str
    features: FrozenSet[Feature] = frozenset()
    models: Tuple[ModelInfo, ...] = ()
    default_model: Optional[str] = None

    @property
    def descriptor(self) -> ProviderDescriptor:
        return ProviderDescriptor(
            name=self.name,
            kind=self.kind.value,
            features=frozenset(self.features),
            models=tuple(self.models),
            default_model=self.default_model,
        )

    def available_models(self) -> List[ModelInfo]:
        return list(self.models)

    def supports(self, feature: Feature) -> bool:
        return feature in self.features

    def resolve_model(self, requested: Optional[str]) -> ModelInfo:
        """Return the model for ``requested`` (id or alias) or the default."""

        name = (requested or "").strip() or self.default_model
        if not name:
            if self.models:
                return self.models[0]
            raise ProviderError(f"Provider '{self.name}' declares no models", provider=self.name)
        for model in self.models:
            if model.matches(name):
                return model
        raise ModelNotFoundError(name, provider=self.name, available=[model.id for model in self.models])

    def validate(self, request: RequestT) -> ModelInfo:
        """Check ``request`` against this provider without any I/O."""

        prompt = getattr(request, "prompt", "")
        if not isinstance(prompt, str) or not prompt.strip():
            raise InvalidInputError("Prompt cannot be empty", field="prompt", provider=self.name)

        for feature in sorted(request.requested_features(), key=lambda item: item.value):
            if feature not in self.features:
                raise FeatureNotSupportedError(feature.value, provider=self.name)

        model = self.resolve_model(getattr(request, "model", None))
        if model.max_prompt_length and len(prompt) > model.max_prompt_length:
            raise InvalidInputError(
                f"Prompt exceeds {model.max_prompt_length} characters for model {model.id}",
                field="prompt",
                provider=self.name,
            )
        self._check_request(request, model)
        return model

    async def generate(self, request: RequestT) -> List[OutputT]:
        """Validate ``request`` and produce canonical outputs."""

        model = self.validate(request)
        logger.info("Generating %s with provider=%s model=%s", self.kind.value, self.name, model.id)
        return await self._generate(request, model)

    def _check_request(self, request: RequestT, model: ModelInfo) -> None:
        """Kind-specific validation hook."""

    def _check_aspect_ratio(self, aspect_ratio: Optional[str], model: ModelInfo) -> None:
        if aspect_ratio and model.aspect_ratios and aspect_ratio not in model.aspect_ratios:
            raise InvalidInputError(
                f"Aspect ratio '{aspect_ratio}' is not supported by {model.id}. "
                f"Supported: {list(model.aspect_ratios)}",
                field="aspect_ratio",
                provider=self.name,
            )

    def _check_sample_count(self, count: int, model: ModelInfo, *, field: str) -> None:
        if count < 1 or count > model.max_samples:
            raise InvalidInputError(
                f"{field} must be between 1 and {model.max_samples} for {model.id}",
                field=field,
                provider=self.name,
            )

    @abstractmethod
    async def _generate(self, request: RequestT, model: ModelInfo) -> List[OutputT]:
        """Call the vendor with an already validated request."""


class BaseImageProvider(BaseProvider[ImageGenerateRequest, ImageOutput]):
    """Base interface for image generation providers."""

    kind = MediaKind.IMAGE

    upscale_model: Optional[str] = None

    def _check_request(self, request: ImageGenerateRequest, model: ModelInfo) -> None:
        self._check_aspect_ratio(request.aspect_ratio, model)
        self._check_sample_count(request.number_of_images, model, field="number_of_images")

    def resolve_upscale_factor(self, factor: Optional[str]) -> str:
        """Return the normalised factor, or raise before any image is loaded."""

        if not self.supports(Feature.UPSCALE) or not self.upscale_model:
            raise FeatureNotSupportedError(Feature.UPSCALE.value, provider=self.name)
        value = (factor or image_config.DEFAULT_UPSCALE_FACTOR).strip().lower()
        if value not in image_config.UPSCALE_FACTORS:
            raise InvalidInputError(
                f"Invalid upscale factor '{factor}'. Supported: {list(image_config.UPSCALE_FACTORS)}",
                field="upscale_factor",
                provider=self.name,
            )
        return value

    async def upscale(self, request: ImageUpscaleRequest) -> List[ImageOutput]:
        factor = self.resolve_upscale_factor(request.upscale_factor)
        if not request.image_data:
            raise InvalidInputError("Input image is empty", field="image", provider=self.name)
        logger.info("Upscaling image with provider=%s factor=%s", self.name, factor)
        return await self._upscale(request, factor)

    async def _upscale(self, request: ImageUpscaleRequest, factor: str) -> List[ImageOutput]:
        raise FeatureNotSupportedError(Feature.UPSCALE.value, provider=self.name)


VideoRequest = VideoTextRequest | VideoImageRequest | VideoExtendRequest


class BaseVideoProvider(BaseProvider[VideoRequest, VideoOutput]):
    """Base interface for video generation providers.

    Video vendors run long operations; concrete providers submit the job and
    hand the handle to an ``OperationPoller``.
    """

    kind = MediaKind.VIDEO

    def _check_request(self, request: VideoRequest, model: ModelInfo) -> None:
        duration = request.duration_seconds
        if duration is not None and model.durations and duration not in model.durations:
            raise InvalidInputError(
                f"Duration {duration}s is not supported by {model.id}. "
                f"Supported: {list(model.durations)}",
                field="duration_seconds",
                provider=self.name,
            )
        if isinstance(request, VideoExtendRequest):
            if not request.video_uri.strip():
                raise InvalidInputError("Source video is required", field="video_uri", provider=self.name)
            return
        self._check_aspect_ratio(request.aspect_ratio, model)
        if request.generate_audio and not model.supports_audio:
            raise FeatureNotSupportedError(Feature.GENERATE_AUDIO.value, provider=self.name, model=model.id)
        if isinstance(request, VideoImageRequest) and not request.image_data:
            raise InvalidInputError("Input image is empty", field="image", provider=self.name)

    async def extend(self, request: VideoExtendRequest) -> List[VideoOutput]:
        """Validate ``request`` and continue the source clip."""

        model = self.validate(request)
        logger.info("Extending video with provider=%s model=%s", self.name, model.id)
        return await self._extend(request, model)

    async def _extend(self, request: VideoExtendRequest, model: ModelInfo) -> List[VideoOutput]:
        raise FeatureNotSupportedError(Feature.VIDEO_EXTENSION.value, provider=self.name)


class BaseSpeechProvider(BaseProvider[SpeechRequest, AudioOutput]):
    """Base interface for text-to-speech providers."""

    kind = MediaKind.SPEECH

    def _check_request(self, request: SpeechRequest, model: ModelInfo) -> None:
        if request.speaking_rate is not None:
            low, high = speech_config.SPEAKING_RATE_RANGE
            if not low <= request.speaking_rate <= high:
                raise InvalidInputError(
                    f"speaking_rate must be between {low} and {high}",
                    field="speaking_rate",
                    provider=self.name,
                )
        if request.pitch is not None:
            low, high = speech_config.PITCH_RANGE
            if not low <= request.pitch <= high:
                raise InvalidInputError(
                    f"pitch must be between {low} and {high}",
                    field="pitch",
                    provider=self.name,
                )
        for item in request.pronunciations:
            if item.alphabet not in speech_config.PRONUNCIATION_ALPHABETS:
                raise InvalidInputError(
                    f"Unsupported phonetic alphabet '{item.alphabet}'. "
                    f"Supported: {list(speech_config.PRONUNCIATION_ALPHABETS)}",
                    field="pronunciations",
                    provider=self.name,
                )
            if not item.phrase.strip() or not item.phonetic.strip():
                raise InvalidInputError(
                    "Pronunciation entries need both a phrase and a phonetic spelling",
                    field="pronunciations",
                    provider=self.name,
                )

    async def list_voices(self, language_code: Optional[str] = None) -> List[Dict[str, Any]]:
        """Return vendor voices, optionally filtered by language.

        Only called for providers that advertise ``Feature.LIST_VOICES``.
        """

        raise FeatureNotSupportedError(Feature.LIST_VOICES.value, provider=self.name)


class BaseMusicProvider(BaseProvider[MusicRequest, AudioOutput]):
    """Base interface for music generation providers."""

    kind = MediaKind.MUSIC

    def _check_request(self, request: MusicRequest, model: ModelInfo) -> None:
        self._check_sample_count(request.sample_count, model, field="sample_count")


PROVIDER_BASES: Dict[MediaKind, type] = {
    MediaKind.IMAGE: BaseImageProvider,
    MediaKind.VIDEO: BaseVideoProvider,
    MediaKind.SPEECH: BaseSpeechProvider,
    MediaKind.MUSIC: BaseMusicProvider,
}


__all__ = [
    "BaseImageProvider",
    "BaseMusicProvider",
    "BaseProvider",
    "BaseSpeechProvider",
    "BaseVideoProvider",
    "PROVIDER_BASES",
    "VideoRequest",
]
