"""Provider Registry - name-keyed provider instances per media kind."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from core.exceptions import ConfigurationError, ProviderNotConfiguredError
from core.providers.base import PROVIDER_BASES, BaseProvider
from core.providers.capabilities import ProviderDescriptor
from core.providers.types import MediaKind

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """Map ``(kind, name)`` to a provider instance plus one default per kind.

    The registry is populated once at startup and read concurrently afterwards.
    Dicts keep insertion order, so listings follow registration order and a
    re-registered name keeps its original position.
    """

    def __init__(self) -> None:
        self._providers: Dict[MediaKind, Dict[str, BaseProvider]] = {kind: {} for kind in MediaKind}
        self._defaults: Dict[MediaKind, str] = {}

    def register(
        self,
        kind: MediaKind | str,
        name: str,
        provider: BaseProvider,
        *,
        default: bool = False,
    ) -> None:
        """Register ``provider`` under ``name``; the last registration wins."""

        media_kind = MediaKind.parse(kind)
        key = name.strip()
        if not key:
            raise ConfigurationError("Provider name cannot be empty", key=f"provider.{media_kind.value}")

        expected = PROVIDER_BASES[media_kind]
        if not isinstance(provider, expected):
            raise ConfigurationError(
                f"Provider '{key}' is not a {media_kind.value} provider",
                key=f"provider.{media_kind.value}.{key}",
            )

        if key in self._providers[media_kind]:
            logger.info("Replacing %s provider '%s'", media_kind.value, key)
        self._providers[media_kind][key] = provider
        logger.debug("Registered %s provider '%s'", media_kind.value, key)

        if default:
            self.set_default(media_kind, key)

    def set_default(self, kind: MediaKind | str, name: str) -> None:
        media_kind = MediaKind.parse(kind)
        if name not in self._providers[media_kind]:
            raise ConfigurationError(
                f"Default {media_kind.value} provider '{name}' is not registered. "
                f"Available: {self.names(media_kind)}",
                key=f"{media_kind.value.upper()}_PROVIDER",
            )
        self._defaults[media_kind] = name

    def default_name(self, kind: MediaKind | str) -> Optional[str]:
        return self._defaults.get(MediaKind.parse(kind))

    def resolve(self, kind: MediaKind | str, requested_name: Optional[str] = None) -> BaseProvider:
        """Return the provider named ``requested_name`` or the kind's default.

        An unknown explicit name never falls back to the default.
        """

        media_kind = MediaKind.parse(kind)
        providers = self._providers[media_kind]
        requested = (requested_name or "").strip() or None

        name = requested or self._defaults.get(media_kind)
        if name is None or name not in providers:
            raise ProviderNotConfiguredError(media_kind.value, requested, list(providers))
        return providers[name]

    def list(self, kind: MediaKind | str) -> List[ProviderDescriptor]:
        media_kind = MediaKind.parse(kind)
        return [provider.descriptor for provider in self._providers[media_kind].values()]

    def names(self, kind: MediaKind | str) -> List[str]:
        return list(self._providers[MediaKind.parse(kind)])

    def kinds(self) -> List[MediaKind]:
        return [kind for kind in MediaKind if self._providers[kind]]

    def __contains__(self, item: object) -> bool:
        if not isinstance(item, tuple) or len(item) != 2:
            return False
        kind, name = item
        return name in self._providers[MediaKind.parse(kind)]


__all__ = ["ProviderRegistry"]
