"""Provider Factory - build the ProviderRegistry from settings.

Registration Rules:
    - Vertex-backed providers (imagen, veo, cloud_tts, lyria) need PROJECT_ID
    - The Gemini image and speech providers need GOOGLE_API_KEY (or an injected client)
    - The Sora provider needs OPENAI_API_KEY (or an injected client)
Default Selection per Kind:
    1. An explicit ``<KIND>_PROVIDER`` override must name a registered provider,
       otherwise startup fails with ConfigurationError
    2. Without an override, the preference in config.providers is used when
       registered, else the first registered provider of that kind
    3. A kind with no registered providers has no default; resolving it raises
       ProviderNotConfiguredError
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from config import gcp as gcp_config
from config import providers as providers_config
from core.auth.tokens import TokenProvider, build_token_provider
from core.clients.ai import get_gemini_client, get_openai_async_client
from core.clients.vertex import VertexClient
from core.config import Settings
from core.exceptions import ConfigurationError
from core.providers.image import GeminiImageProvider, ImagenProvider
from core.providers.music import LyriaProvider
from core.providers.operations import OperationPoller, PollingConfig
from core.providers.registries import ProviderRegistry
from core.providers.speech import CloudTTSProvider, GeminiTTSProvider
from core.providers.types import MediaKind
from core.providers.video import OpenAIVideoProvider, VeoProvider

logger = logging.getLogger(__name__)


def build_poller(settings: Settings) -> OperationPoller:
    try:
        config = PollingConfig.from_settings(settings.polling)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid polling configuration: {exc}", key="LRO_*") from exc
    return OperationPoller(config)


def _select_defaults(registry: ProviderRegistry, settings: Settings) -> None:
    for kind in MediaKind:
        names = registry.names(kind)
        override = settings.default_providers.get(kind.value)
        if override:
            registry.set_default(kind, override)
            continue
        if not names:
            logger.warning("No %s providers configured", kind.value)
            continue
        preferred = providers_config.DEFAULT_PROVIDERS.get(kind.value)
        registry.set_default(kind, preferred if preferred in names else names[0])


def build_provider_registry(
    settings: Settings,
    *,
    token_provider: Optional[TokenProvider] = None,
    http_client: Optional[httpx.AsyncClient] = None,
    poller: Optional[OperationPoller] = None,
    gemini_client: Any = None,
    openai_client: Any = None,
) -> ProviderRegistry:
    """Instantiate every provider whose credentials are configured."""

    registry = ProviderRegistry()
    poller = poller or build_poller(settings)

    if settings.vertex_enabled:
        vertex = VertexClient(
            project_id=settings.project_id,
            location=settings.location or gcp_config.LOCATION,
            token_provider=token_provider or build_token_provider(),
            http_client=http_client,
        )
        registry.register(MediaKind.IMAGE, ImagenProvider.name, ImagenProvider(vertex))
        registry.register(MediaKind.VIDEO, VeoProvider.name, VeoProvider(vertex, poller))
        registry.register(MediaKind.SPEECH, CloudTTSProvider.name, CloudTTSProvider(vertex))
        registry.register(MediaKind.MUSIC, LyriaProvider.name, LyriaProvider(vertex))
    else:
        logger.warning("PROJECT_ID not set; Vertex AI providers disabled")

    if gemini_client is not None or settings.google_api_key:
        client = gemini_client or get_gemini_client(settings.google_api_key)
        registry.register(MediaKind.IMAGE, GeminiImageProvider.name, GeminiImageProvider(client))
        registry.register(MediaKind.SPEECH, GeminiTTSProvider.name, GeminiTTSProvider(client))

    if openai_client is not None or settings.openai_api_key:
        client = openai_client or get_openai_async_client(settings.openai_api_key)
        registry.register(MediaKind.VIDEO, OpenAIVideoProvider.name, OpenAIVideoProvider(client, poller))

    _select_defaults(registry, settings)

    for kind in registry.kinds():
        logger.info(
            "%s providers: %s (default=%s)",
            kind.value,
            registry.names(kind),
            registry.default_name(kind),
        )
    return registry


__all__ = ["build_poller", "build_provider_registry"]
