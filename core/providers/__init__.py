"""Media providers, the provider registry, and long-running operation polling.

Usage Example:
    registry = build_provider_registry(load_settings())
    provider = registry.resolve(MediaKind.IMAGE)          # default image provider
    outputs = await provider.generate(ImageGenerateRequest(prompt="a lighthouse"))

See Also:
    - core/providers/factory.py: registry construction from settings
    - core/providers/operations.py: OperationPoller
"""

from core.providers.base import (
    BaseImageProvider,
    BaseMusicProvider,
    BaseProvider,
    BaseSpeechProvider,
    BaseVideoProvider,
)
from core.providers.capabilities import Feature, ModelInfo, ProviderDescriptor
from core.providers.operations import Operation, OperationPoller, OperationState, PollingConfig, PollResult
from core.providers.registries import ProviderRegistry
from core.providers.types import (
    AudioOutput,
    ImageGenerateRequest,
    ImageOutput,
    MediaKind,
    MediaOutput,
    MusicRequest,
    Pronunciation,
    SpeechRequest,
    VideoImageRequest,
    VideoOutput,
    VideoTextRequest,
)

__all__ = [
    "AudioOutput",
    "BaseImageProvider",
    "BaseMusicProvider",
    "BaseProvider",
    "BaseSpeechProvider",
    "BaseVideoProvider",
    "Feature",
    "ImageGenerateRequest",
    "ImageOutput",
    "MediaKind",
    "MediaOutput",
    "ModelInfo",
    "MusicRequest",
    "Operation",
    "OperationPoller",
    "OperationState",
    "PollResult",
    "PollingConfig",
    "Pronunciation",
    "ProviderDescriptor",
    "ProviderRegistry",
    "SpeechRequest",
    "VideoImageRequest",
    "VideoOutput",
    "VideoTextRequest",
]
