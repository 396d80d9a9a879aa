"""Test configuration helpers."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Iterable, List, Tuple

import httpx
import pytest

# Explicitly opt-in to the async plugins we rely on. Some execution environments
# disable plugin auto-discovery via ``PYTEST_DISABLE_PLUGIN_AUTOLOAD`` which
# prevents ``pytest-asyncio`` and AnyIO's plugin from being loaded even if the
# packages are installed.
pytest_plugins = ("anyio", "pytest_asyncio")

# Ensure the repository root is importable so that ``import core`` and the
# other absolute imports used throughout the codebase succeed.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from core.auth.tokens import StaticTokenSource, TokenProvider  # noqa: E402


@pytest.fixture
def anyio_backend() -> str:
    """Default AnyIO backend used when tests do not override the fixture."""

    return "asyncio"


@pytest.fixture(scope="session", autouse=True)
def suppress_asyncio_debug_logging() -> None:
    """Prevent asyncio debug logs from writing to closed pytest capture streams."""

    logger = logging.getLogger("asyncio")
    if logger.getEffectiveLevel() < logging.INFO:
        logger.setLevel(logging.INFO)


@pytest.fixture
def token_provider() -> TokenProvider:
    return TokenProvider(StaticTokenSource("test-token"))


class RecordingTransport:
    """Build an ``httpx.MockTransport`` that records requests and replays responses."""

    def __init__(self, responses: Iterable[httpx.Response] | None = None, handler=None) -> None:
        self.requests: List[httpx.Request] = []
        self._responses = list(responses or [])
        self._handler = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self._handler is not None:
            return self._handler(request)
        if not self._responses:
            raise AssertionError(f"Unexpected request {request.method} {request.url}")
        return self._responses.pop(0)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


@pytest.fixture
def recording_transport():
    """Factory fixture: ``recording_transport(responses)`` -> (transport, client)."""

    def _factory(
        responses: Iterable[httpx.Response] | None = None,
        handler=None,
    ) -> Tuple[RecordingTransport, httpx.AsyncClient]:
        transport = RecordingTransport(responses, handler)
        return transport, transport.client()

    return _factory
