"""Fixtures building the FastAPI app around fake collaborators."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from core.config import Settings
from core.providers.registries import ProviderRegistry
from infrastructure.storage.resolver import MediaLocationResolver
from main import create_app
from tests.helpers import (
    FakeImageProvider,
    FakeMediaToolRunner,
    FakeMusicProvider,
    FakeSpeechProvider,
    FakeVideoProvider,
    MemoryStorageBackend,
)


@pytest.fixture
def gcs() -> MemoryStorageBackend:
    return MemoryStorageBackend(
        "gs",
        {
            "gs://bucket/in/frame.png": b"\x89PNG-frame",
            "gs://bucket/in/clip.mp4": b"remote-video",
        },
    )


@pytest.fixture
def registry() -> ProviderRegistry:
    registry = ProviderRegistry()
    registry.register("image", "fake_image", FakeImageProvider(), default=True)
    registry.register("video", "fake_video", FakeVideoProvider(), default=True)
    registry.register(
        "speech",
        "fake_speech",
        FakeSpeechProvider(voices=[{"name": "Kore", "language_codes": ["en-US"]}]),
        default=True,
    )
    registry.register("speech", "silent", FakeSpeechProvider("silent"))
    registry.register("music", "fake_music", FakeMusicProvider(), default=True)
    return registry


@pytest.fixture
def media_tools() -> FakeMediaToolRunner:
    return FakeMediaToolRunner()


@pytest.fixture
def client(tmp_path, gcs, registry, media_tools):
    app = create_app(
        settings=Settings(scratch_dir=tmp_path / "scratch"),
        provider_registry=registry,
        location_resolver=MediaLocationResolver({"gs": gcs}, scratch_dir=tmp_path / "scratch"),
        media_tools=media_tools,
    )
    with TestClient(app) as test_client:
        yield test_client
