from __future__ import annotations

"""Generative Media Backend - Main Application Entry Point
This is the FastAPI application factory for the multi-provider media backend.
Architecture Overview:
    - Image, video, speech and music generation behind a ProviderRegistry
    - Long-running vendor jobs driven to completion by an OperationPoller
    - Inputs and outputs addressed as local paths or gs:// / s3:// URIs
    - ffmpeg/ffprobe post-processing through the avtool feature
Entry Points:
    - /health - Health check endpoint
    - /api/v1/* - RESTful API endpoints for each feature
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from core.utils.env import is_production
# Track startup time in non-production environments
start_time = time.time() if not is_production() else None

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import gcp as gcp_config
from core.auth.tokens import build_token_provider
from core.config import Settings, load_settings
from core.exceptions import ServiceError
from core.http.errors import format_error, status_for_error
from core.logging import setup_logging
from core.providers.factory import build_provider_registry
from core.providers.registries import ProviderRegistry
from core.pydantic_schemas import error as api_error
from features.avtool import router as avtool_router
from features.image import router as image_router
from features.music import router as music_router
from features.providers import router as providers_router
from features.speech import router as speech_router
from features.video import router as video_router
from infrastructure.media_tools import MediaToolRunner
from infrastructure.storage import build_location_resolver
from infrastructure.storage.resolver import MediaLocationResolver

setup_logging()

logger = logging.getLogger(__name__)

APP_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build shared clients and the provider registry; close them on shutdown."""

    state = app.state
    settings: Settings = state.settings or load_settings()
    state.settings = settings

    http_client: Optional[httpx.AsyncClient] = None
    if state.provider_registry is None or state.location_resolver is None:
        http_client = httpx.AsyncClient(timeout=gcp_config.HTTP_TIMEOUT_SECONDS)
        token_provider = build_token_provider()
        if state.provider_registry is None:
            state.provider_registry = build_provider_registry(
                settings,
                token_provider=token_provider,
                http_client=http_client,
            )
        if state.location_resolver is None:
            state.location_resolver = build_location_resolver(
                settings,
                token_provider=token_provider,
                http_client=http_client,
            )
    if state.media_tools is None:
        state.media_tools = MediaToolRunner(
            ffmpeg_binary=settings.ffmpeg_binary,
            ffprobe_binary=settings.ffprobe_binary,
            timeout_seconds=settings.media_tool_timeout_seconds,
        )

    logger.info("Application started (environment=%s)", settings.environment)
    yield
    logger.info("Application shutting down...")
    if http_client is not None:
        await http_client.aclose()
    logger.info("Shutdown complete")


def create_app(
    *,
    settings: Optional[Settings] = None,
    provider_registry: Optional[ProviderRegistry] = None,
    location_resolver: Optional[MediaLocationResolver] = None,
    media_tools: Optional[MediaToolRunner] = None,
) -> FastAPI:
    """Application factory returning a configured FastAPI instance.

    Collaborators passed in are used as-is; anything omitted is built from the
    environment when the lifespan starts.
    """

    app = FastAPI(
        title="Generative Media Backend",
        description="Image, video, speech and music generation with media post-processing",
        version=APP_VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.provider_registry = provider_registry
    app.state.location_resolver = location_resolver
    app.state.media_tools = media_tools

    if is_production():
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    else:
        # Development: allow any localhost port
        app.add_middleware(
            CORSMiddleware,
            allow_origin_regex=r"^http://(localhost|127\.0\.0\.1)(:\d+)?$",
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        """Return a structured API envelope for every service failure."""

        status_code = status_for_error(exc)
        if status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        else:
            logger.warning("%s %s rejected: %s", request.method, request.url.path, exc)
        payload = api_error(code=status_code, message=str(exc), data=format_error(exc))
        return JSONResponse(status_code=status_code, content=payload)

    @app.get("/health")
    async def health_check(request: Request) -> Dict[str, Any]:
        registry: Optional[ProviderRegistry] = request.app.state.provider_registry
        providers = {}
        if registry is not None:
            providers = {kind.value: registry.names(kind) for kind in registry.kinds()}
        return {"status": "healthy", "version": APP_VERSION, "providers": providers}

    app.include_router(image_router, prefix="/api/v1")
    app.include_router(video_router, prefix="/api/v1")
    app.include_router(speech_router, prefix="/api/v1")
    app.include_router(music_router, prefix="/api/v1")
    app.include_router(providers_router, prefix="/api/v1")
    app.include_router(avtool_router, prefix="/api/v1")

    timing_info = ""
    if start_time is not None:
        elapsed = time.time() - start_time
        timing_info = f" (loaded in {elapsed:.2f}s)"

    logger.info("Application created with image, video, speech, music, providers and avtool routers%s", timing_info)
    return app


app = create_app()


if __name__ == "__main__":  # pragma: no cover - manual execution helper
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=load_settings().port)
