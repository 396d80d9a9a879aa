"""SDK clients used by the SDK-backed media providers."""

from __future__ import annotations

import logging
from typing import Dict, Tuple

from google import genai
from google.genai import errors as genai_errors
from openai import AsyncOpenAI

from core.exceptions import CredentialsNotConfiguredError, ProviderAPIError, RateLimitError
from core.utils.env import get_env

logger = logging.getLogger(__name__)

# Keyed by (sdk, api key) so a second key never receives the first key's client
ai_clients: Dict[Tuple[str, str], object] = {}


def get_gemini_client(api_key: str | None = None) -> genai.Client:
    """Return a cached google-genai client for ``api_key`` (or ``GOOGLE_API_KEY``)."""

    key = api_key or get_env("GOOGLE_API_KEY")
    if not key:
        raise CredentialsNotConfiguredError("GOOGLE_API_KEY is not set")

    client = ai_clients.get(("gemini", key))
    if client is None:
        client = genai.Client(api_key=key)
        ai_clients[("gemini", key)] = client
        logger.info("Initialised Gemini client")
    return client  # type: ignore[return-value]


def get_openai_async_client(api_key: str | None = None) -> AsyncOpenAI:
    """Return a cached asynchronous OpenAI client for ``api_key`` (or ``OPENAI_API_KEY``)."""

    key = api_key or get_env("OPENAI_API_KEY")
    if not key:
        raise CredentialsNotConfiguredError("OPENAI_API_KEY is not set")

    client = ai_clients.get(("openai_async", key))
    if client is None:
        client = AsyncOpenAI(api_key=key)
        ai_clients[("openai_async", key)] = client
        logger.info("Initialised async OpenAI client")
    return client  # type: ignore[return-value]


def wrap_genai_error(exc: Exception, endpoint: str, provider: str) -> Exception:
    """Translate google-genai exceptions into the provider error taxonomy."""

    if isinstance(exc, genai_errors.APIError):
        if exc.code == 429:
            return RateLimitError(f"Gemini rate limit on {endpoint}: {exc}", provider=provider)
        return ProviderAPIError(
            f"Gemini {endpoint} failed: {exc}",
            endpoint=endpoint,
            status_code=exc.code or 0,
            provider=provider,
            original_error=exc,
        )
    return ProviderAPIError(
        f"Gemini {endpoint} failed: {exc}",
        endpoint=endpoint,
        status_code=0,
        provider=provider,
        original_error=exc,
    )


__all__ = ["ai_clients", "get_gemini_client", "get_openai_async_client", "wrap_genai_error"]
