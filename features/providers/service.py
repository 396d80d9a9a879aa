"""Read-only views over the provider registry."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from core.providers.registries import ProviderRegistry
from core.providers.types import MediaKind


class ProviderCatalogService:
    def __init__(self, registry: ProviderRegistry) -> None:
        self._registry = registry

    def _kind_summary(self, kind: MediaKind) -> Dict[str, Any]:
        return {
            "kind": kind.value,
            "default": self._registry.default_name(kind),
            "providers": [descriptor.to_dict() for descriptor in self._registry.list(kind)],
        }

    def list_all(self) -> List[Dict[str, Any]]:
        """Every media kind, including kinds with no configured providers."""

        return [self._kind_summary(kind) for kind in MediaKind]

    def list_kind(self, kind: str) -> Dict[str, Any]:
        return self._kind_summary(MediaKind.parse(kind))

    def list_models(self, kind: str, provider_name: Optional[str] = None) -> Dict[str, Any]:
        media_kind = MediaKind.parse(kind)
        provider = self._registry.resolve(media_kind, provider_name)
        return {
            "kind": media_kind.value,
            "provider": provider.name,
            "default_model": provider.default_model,
            "models": [model.to_dict() for model in provider.available_models()],
        }
