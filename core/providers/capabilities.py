"""Provider capability declarations."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple


class Feature(str, Enum):
    """Optional request features a provider may or may not honour."""

    NEGATIVE_PROMPT = "negative_prompt"
    ASPECT_RATIO = "aspect_ratio"
    SEED = "seed"
    MULTIPLE_SAMPLES = "multiple_samples"
    DURATION = "duration"
    GENERATE_AUDIO = "generate_audio"
    IMAGE_INPUT = "image_input"
    SPEAKING_RATE = "speaking_rate"
    PITCH = "pitch"
    PRONUNCIATIONS = "pronunciations"
    STYLE = "style"
    LIST_VOICES = "list_voices"
    UPSCALE = "upscale"
    VIDEO_EXTENSION = "video_extension"


@dataclass(frozen=True, slots=True)
class ModelInfo:
    """Static description of one vendor model."""

    id: str
    aliases: Tuple[str, ...] = ()
    aspect_ratios: Tuple[str, ...] = ()
    durations: Tuple[int, ...] = ()
    max_samples: int = 1
    max_prompt_length: Optional[int] = None
    supports_audio: bool = False

    @classmethod
    def from_config(cls, model_id: str, entry: Mapping[str, Any]) -> "ModelInfo":
        """Build a model entry from a config/ catalogue item."""

        return cls(
            id=model_id,
            aliases=tuple(entry.get("aliases", ())),
            aspect_ratios=tuple(entry.get("aspect_ratios", ())),
            durations=tuple(entry.get("durations", ())),
            max_samples=int(entry.get("max_samples", 1)),
            max_prompt_length=entry.get("max_prompt_length"),
            supports_audio=bool(entry.get("supports_audio", False)),
        )

    def matches(self, name: str) -> bool:
        candidate = name.strip().lower()
        return candidate == self.id.lower() or candidate in {alias.lower() for alias in self.aliases}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "aliases": list(self.aliases),
            "aspect_ratios": list(self.aspect_ratios),
            "durations": list(self.durations),
            "max_samples": self.max_samples,
            "max_prompt_length": self.max_prompt_length,
            "supports_audio": self.supports_audio,
        }


def models_from_config(catalogue: Mapping[str, Mapping[str, Any]]) -> Tuple[ModelInfo, ...]:
    return tuple(ModelInfo.from_config(model_id, entry) for model_id, entry in catalogue.items())


@dataclass(frozen=True, slots=True)
class ProviderDescriptor:
    """Read-only summary of a registered provider."""

    name: str
    kind: str
    features: frozenset = field(default_factory=frozenset)
    models: Tuple[ModelInfo, ...] = ()
    default_model: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "kind": self.kind,
            "features": sorted(feature.value for feature in self.features),
            "models": [model.id for model in self.models],
            "default_model": self.default_model,
        }


__all__ = ["Feature", "ModelInfo", "ProviderDescriptor", "models_from_config"]
