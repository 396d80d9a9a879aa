"""FastAPI dependencies resolving the shared objects built during app startup."""

from __future__ import annotations

import logging

from fastapi import Request

from core.config import Settings
from core.exceptions import ConfigurationError
from core.providers.registries import ProviderRegistry
from infrastructure.media_tools import MediaToolRunner
from infrastructure.storage.resolver import MediaLocationResolver

logger = logging.getLogger(__name__)


def _state_attribute(request: Request, name: str):
    value = getattr(request.app.state, name, None)
    if value is None:
        logger.error("Application state is missing '%s'; was the lifespan run?", name)
        raise ConfigurationError(f"Application is not initialised ({name} missing)", key=name)
    return value


def get_settings(request: Request) -> Settings:
    return _state_attribute(request, "settings")


def get_provider_registry(request: Request) -> ProviderRegistry:
    """Provide the process-wide ProviderRegistry."""
    return _state_attribute(request, "provider_registry")


def get_location_resolver(request: Request) -> MediaLocationResolver:
    """Provide the MediaLocationResolver used for inputs and outputs."""
    return _state_attribute(request, "location_resolver")


def get_media_tools(request: Request) -> MediaToolRunner:
    return _state_attribute(request, "media_tools")


__all__ = [
    "get_location_resolver",
    "get_media_tools",
    "get_provider_registry",
    "get_settings",
]
