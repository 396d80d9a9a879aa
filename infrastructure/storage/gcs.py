"""Google Cloud Storage backend over the JSON API.

Endpoints (``{base}`` defaults to https://storage.googleapis.com):
    upload   POST {base}/upload/storage/v1/b/{bucket}/o?uploadType=media&name={key}
    download GET  {base}/storage/v1/b/{bucket}/o/{key}?alt=media
    exists   GET  {base}/storage/v1/b/{bucket}/o/{key}
    delete   DELETE {base}/storage/v1/b/{bucket}/o/{key}
"""

from __future__ import annotations

import logging
from typing import Any, Mapping
from urllib.parse import quote

import httpx

from config import gcp as gcp_config
from config.storage import DEFAULT_URL_TTL_SECONDS
from core.auth.tokens import TokenProvider
from core.exceptions import (
    AuthenticationError,
    InvalidLocationError,
    StorageAuthError,
    StorageNotFoundError,
    StorageOperationError,
)
from core.utils.media import content_type_for
from infrastructure.storage.base import StorageBackend
from infrastructure.storage.locations import RemoteLocation, StorageLocation

logger = logging.getLogger(__name__)


def _remote(location: StorageLocation) -> RemoteLocation:
    if not isinstance(location, RemoteLocation) or location.scheme != "gs":
        raise InvalidLocationError(f"{location} is not a gs:// location", location=str(location))
    return location


class GCSStorageBackend(StorageBackend):
    scheme = "gs"

    def __init__(
        self,
        token_provider: TokenProvider,
        *,
        http_client: httpx.AsyncClient | None = None,
        base_url: str = gcp_config.STORAGE_API_BASE_URL,
    ) -> None:
        self._tokens = token_provider
        self._http = http_client or httpx.AsyncClient(timeout=gcp_config.HTTP_TIMEOUT_SECONDS)
        self._base_url = base_url.rstrip("/")

    def _object_url(self, location: RemoteLocation) -> str:
        return f"{self._base_url}/storage/v1/b/{location.bucket}/o/{quote(location.key, safe='')}"

    async def _send(
        self,
        method: str,
        url: str,
        *,
        location: RemoteLocation,
        operation: str,
        scope: str,
        params: Mapping[str, Any] | None = None,
        content: bytes | None = None,
        content_type: str | None = None,
    ) -> httpx.Response:
        try:
            token = await self._tokens.get_token([scope])
        except AuthenticationError as exc:
            raise StorageAuthError(
                f"Could not obtain GCS credentials: {exc}",
                location=str(location),
                operation=operation,
            ) from exc

        headers = {"Authorization": f"Bearer {token}"}
        if content_type:
            headers["Content-Type"] = content_type
        try:
            return await self._http.request(method, url, params=params, content=content, headers=headers)
        except httpx.HTTPError as exc:
            raise StorageOperationError(
                f"GCS {operation} failed for {location}: {exc}",
                location=str(location),
                operation=operation,
                original_error=exc,
            ) from exc

    @staticmethod
    def _raise_for_status(response: httpx.Response, location: RemoteLocation, operation: str) -> None:
        if response.status_code < 400:
            return
        if response.status_code == 404:
            raise StorageNotFoundError(f"GCS object not found: {location}", location=str(location), operation=operation)
        if response.status_code in (401, 403):
            raise StorageAuthError(
                f"GCS denied {operation} on {location} ({response.status_code})",
                location=str(location),
                operation=operation,
            )
        raise StorageOperationError(
            f"GCS {operation} failed for {location}: {response.status_code} {response.text[:300]}",
            location=str(location),
            operation=operation,
        )

    async def upload(self, location: StorageLocation, data: bytes, content_type: str | None = None) -> str:
        remote = _remote(location)
        url = f"{self._base_url}/upload/storage/v1/b/{remote.bucket}/o"
        response = await self._send(
            "POST",
            url,
            location=remote,
            operation="upload",
            scope=gcp_config.STORAGE_READ_WRITE_SCOPE,
            params={"uploadType": "media", "name": remote.key},
            content=data,
            content_type=content_type or content_type_for(remote.key),
        )
        self._raise_for_status(response, remote, "upload")
        logger.info("Uploaded %d bytes to %s", len(data), remote)
        return str(remote)

    async def download(self, location: StorageLocation) -> bytes:
        remote = _remote(location)
        response = await self._send(
            "GET",
            self._object_url(remote),
            location=remote,
            operation="download",
            scope=gcp_config.STORAGE_READ_ONLY_SCOPE,
            params={"alt": "media"},
        )
        self._raise_for_status(response, remote, "download")
        logger.info("Downloaded %d bytes from %s", len(response.content), remote)
        return response.content

    async def exists(self, location: StorageLocation) -> bool:
        remote = _remote(location)
        response = await self._send(
            "GET",
            self._object_url(remote),
            location=remote,
            operation="exists",
            scope=gcp_config.STORAGE_READ_ONLY_SCOPE,
        )
        if response.status_code == 404:
            return False
        self._raise_for_status(response, remote, "exists")
        return True

    async def get_url(self, location: StorageLocation, ttl_seconds: int = DEFAULT_URL_TTL_SECONDS) -> str:
        # Public object URL; readers still need bucket-level access
        remote = _remote(location)
        return f"{self._base_url}/{remote.bucket}/{quote(remote.key)}"

    async def delete(self, location: StorageLocation) -> None:
        remote = _remote(location)
        response = await self._send(
            "DELETE",
            self._object_url(remote),
            location=remote,
            operation="delete",
            scope=gcp_config.STORAGE_READ_WRITE_SCOPE,
        )
        if response.status_code == 404:
            logger.debug("GCS object %s already absent", remote)
            return
        self._raise_for_status(response, remote, "delete")


__all__ = ["GCSStorageBackend"]
