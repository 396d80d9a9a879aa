"""Filesystem storage backend."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from config.storage import DEFAULT_URL_TTL_SECONDS
from core.exceptions import InvalidLocationError, StorageNotFoundError, StorageOperationError
from infrastructure.storage.base import StorageBackend
from infrastructure.storage.locations import LocalLocation, StorageLocation

logger = logging.getLogger(__name__)


def _local_path(location: StorageLocation) -> Path:
    if not isinstance(location, LocalLocation):
        raise InvalidLocationError(f"{location} is not a local path", location=str(location))
    return location.as_path()


class LocalStorageBackend(StorageBackend):
    """Read and write plain files; every call runs in a worker thread."""

    scheme = "file"

    async def upload(self, location: StorageLocation, data: bytes, content_type: str | None = None) -> str:
        path = _local_path(location)

        def _write() -> None:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)

        try:
            await asyncio.to_thread(_write)
        except OSError as exc:
            raise StorageOperationError(
                f"Failed to write {path}: {exc}",
                location=str(location),
                operation="upload",
                original_error=exc,
            ) from exc
        logger.debug("Wrote %d bytes to %s", len(data), path)
        return str(path)

    async def download(self, location: StorageLocation) -> bytes:
        path = _local_path(location)
        try:
            return await asyncio.to_thread(path.read_bytes)
        except FileNotFoundError as exc:
            raise StorageNotFoundError(f"File not found: {path}", location=str(location), operation="download") from exc
        except OSError as exc:
            raise StorageOperationError(
                f"Failed to read {path}: {exc}",
                location=str(location),
                operation="download",
                original_error=exc,
            ) from exc

    async def exists(self, location: StorageLocation) -> bool:
        path = _local_path(location)
        return await asyncio.to_thread(path.is_file)

    async def get_url(self, location: StorageLocation, ttl_seconds: int = DEFAULT_URL_TTL_SECONDS) -> str:
        return _local_path(location).resolve().as_uri()

    async def delete(self, location: StorageLocation) -> None:
        path = _local_path(location)
        try:
            await asyncio.to_thread(path.unlink, missing_ok=True)
        except OSError as exc:
            raise StorageOperationError(
                f"Failed to delete {path}: {exc}",
                location=str(location),
                operation="delete",
                original_error=exc,
            ) from exc


__all__ = ["LocalStorageBackend"]
