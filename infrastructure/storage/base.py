"""Storage backend contract shared by the local filesystem and object stores."""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from pathlib import Path

from config.storage import DEFAULT_URL_TTL_SECONDS
from infrastructure.storage.locations import StorageLocation


class StorageBackend(ABC):
    """Move bytes to and from one kind of storage location."""

    scheme: str

    @abstractmethod
    async def upload(self, location: StorageLocation, data: bytes, content_type: str | None = None) -> str:
        """Store ``data`` at ``location`` and return its canonical reference."""

    @abstractmethod
    async def download(self, location: StorageLocation) -> bytes:
        """Return the bytes stored at ``location``."""

    @abstractmethod
    async def exists(self, location: StorageLocation) -> bool:
        """Return whether an object is stored at ``location``."""

    @abstractmethod
    async def get_url(self, location: StorageLocation, ttl_seconds: int = DEFAULT_URL_TTL_SECONDS) -> str:
        """Return a URL from which ``location`` can be fetched."""

    @abstractmethod
    async def delete(self, location: StorageLocation) -> None:
        """Remove the object at ``location``; missing objects are ignored."""

    async def upload_file(self, location: StorageLocation, path: Path, content_type: str | None = None) -> str:
        data = await asyncio.to_thread(path.read_bytes)
        return await self.upload(location, data, content_type)

    async def download_to_file(self, location: StorageLocation, path: Path) -> Path:
        data = await self.download(location)
        await asyncio.to_thread(path.write_bytes, data)
        return path


__all__ = ["StorageBackend"]
