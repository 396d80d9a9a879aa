"""Authenticated JSON client for Vertex AI and other Google REST APIs."""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

import httpx

from config import gcp as gcp_config
from core.auth.tokens import TokenProvider
from core.exceptions import ProviderAPIError, RateLimitError

logger = logging.getLogger(__name__)


def _retry_after(response: httpx.Response) -> Optional[int]:
    value = response.headers.get("retry-after")
    if not value:
        return None
    try:
        return int(float(value))
    except ValueError:
        return None


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text[:500]
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str):
            return error
    return response.text[:500]


class VertexClient:
    """Send bearer-authenticated JSON requests and map failures to ProviderAPIError."""

    def __init__(
        self,
        *,
        project_id: str,
        location: str,
        token_provider: TokenProvider,
        http_client: httpx.AsyncClient | None = None,
        scopes: tuple[str, ...] = (gcp_config.CLOUD_PLATFORM_SCOPE,),
    ) -> None:
        self.project_id = project_id
        self.location = location
        self._tokens = token_provider
        self._http = http_client or httpx.AsyncClient(timeout=gcp_config.HTTP_TIMEOUT_SECONDS)
        self._scopes = scopes

    def model_endpoint(self, model: str, method: str = "predict") -> str:
        base = gcp_config.VERTEX_MODEL_ENDPOINT.format(
            location=self.location,
            project=self.project_id,
            model=model,
        )
        return f"{base}:{method}"

    async def _headers(self) -> Dict[str, str]:
        token = await self._tokens.get_token(self._scopes)
        headers = {"Authorization": f"Bearer {token}"}
        if self.project_id:
            headers["x-goog-user-project"] = self.project_id
        return headers

    async def request_json(
        self,
        method: str,
        url: str,
        *,
        payload: Mapping[str, Any] | None = None,
        params: Mapping[str, Any] | None = None,
        provider: str | None = None,
    ) -> Dict[str, Any]:
        headers = await self._headers()
        try:
            response = await self._http.request(method, url, json=payload, params=params, headers=headers)
        except httpx.TransportError as exc:
            raise ProviderAPIError(
                f"Request to {url} failed: {exc}",
                endpoint=url,
                status_code=0,
                provider=provider,
                original_error=exc,
            ) from exc

        if response.status_code == 429:
            raise RateLimitError(
                f"Rate limited by {url}: {_error_message(response)}",
                retry_after=_retry_after(response),
                provider=provider,
            )
        if response.status_code >= 400:
            raise ProviderAPIError(
                f"{url} returned {response.status_code}: {_error_message(response)}",
                endpoint=url,
                status_code=response.status_code,
                provider=provider,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise ProviderAPIError(
                f"{url} returned a non-JSON body",
                endpoint=url,
                status_code=response.status_code,
                provider=provider,
                original_error=exc,
            ) from exc
        if not isinstance(data, dict):
            raise ProviderAPIError(
                f"{url} returned an unexpected payload type {type(data).__name__}",
                endpoint=url,
                status_code=response.status_code,
                provider=provider,
            )
        return data

    async def post_json(self, url: str, payload: Mapping[str, Any], *, provider: str | None = None) -> Dict[str, Any]:
        logger.debug("POST %s", url)
        return await self.request_json("POST", url, payload=payload, provider=provider)

    async def get_json(
        self,
        url: str,
        *,
        params: Mapping[str, Any] | None = None,
        provider: str | None = None,
    ) -> Dict[str, Any]:
        logger.debug("GET %s", url)
        return await self.request_json("GET", url, params=params, provider=provider)

    async def aclose(self) -> None:
        await self._http.aclose()


__all__ = ["VertexClient"]
