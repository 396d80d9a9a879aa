"""Resolve media locations to local files and deliver outputs to destinations.

Tools only ever read and write local paths. This module downloads remote
inputs into scratch files and uploads or moves finished outputs to where the
caller asked for them. Scratch files created through :meth:`MediaLocationResolver.scope`
are removed when the scope exits, whatever the exit path.
"""

from __future__ import annotations

import asyncio
import logging
import shutil
from contextlib import asynccontextmanager
from pathlib import Path, PurePosixPath
from typing import AsyncIterator, Dict, Mapping, Optional, Set

from config.storage import SCRATCH_DIR
from core.exceptions import InvalidLocationError
from core.utils.media import content_type_for, extension_for_mime
from infrastructure.storage.base import StorageBackend
from infrastructure.storage.local import LocalStorageBackend
from infrastructure.storage.locations import (
    LocalLocation,
    RemoteLocation,
    StorageLocation,
    parse_location,
)
from services.temporary_storage import create_scratch_file, remove_scratch_file

logger = logging.getLogger(__name__)


class MediaLocationResolver:
    def __init__(
        self,
        backends: Mapping[str, StorageBackend] | None = None,
        *,
        scratch_dir: Path = SCRATCH_DIR,
        local_backend: StorageBackend | None = None,
    ) -> None:
        self._backends: Dict[str, StorageBackend] = dict(backends or {})
        self._local = local_backend or LocalStorageBackend()
        self.scratch_dir = Path(scratch_dir)
        self._scratch: Set[Path] = set()

    def backend_for(self, location: "str | StorageLocation") -> StorageBackend:
        parsed = parse_location(location)
        if isinstance(parsed, LocalLocation):
            return self._local
        backend = self._backends.get(parsed.scheme)
        if backend is None:
            raise InvalidLocationError(
                f"No storage backend configured for {parsed.scheme}:// locations",
                location=str(parsed),
            )
        return backend

    def check_destination(self, location: "str | StorageLocation") -> StorageLocation:
        """Parse ``location`` and confirm a backend can write it, without any I/O."""

        parsed = parse_location(location)
        self.backend_for(parsed)
        return parsed

    def is_remote(self, location: "str | StorageLocation") -> bool:
        return parse_location(location).is_remote

    def owns(self, path: Path) -> bool:
        return Path(path) in self._scratch

    def scratch_path(self, suffix: str = "") -> Path:
        """Reserve a scratch file owned by this resolver."""

        if suffix and not suffix.startswith("."):
            suffix = f".{suffix}"
        path = create_scratch_file(directory=self.scratch_dir, suffix=suffix)
        self._scratch.add(path)
        return path

    def release(self, path: Path) -> bool:
        """Remove a scratch file; paths the resolver does not own are left alone."""

        path = Path(path)
        if path not in self._scratch:
            return False
        self._scratch.discard(path)
        return remove_scratch_file(path)

    async def resolve_input(self, location: "str | StorageLocation") -> Path:
        """Return a local path for ``location``, downloading remote objects."""

        parsed = parse_location(location)
        if isinstance(parsed, LocalLocation):
            return parsed.as_path()

        backend = self.backend_for(parsed)
        target = self.scratch_path(PurePosixPath(parsed.key).suffix)
        try:
            await backend.download_to_file(parsed, target)
        except BaseException:
            self.release(target)
            raise
        logger.info("Resolved %s to scratch file %s", parsed, target)
        return target

    async def handle_output(
        self,
        local_path: Path,
        destination: "str | StorageLocation",
        content_type: str | None = None,
    ) -> str:
        """Deliver a finished local file to ``destination`` and return its reference."""

        source = Path(local_path)
        parsed = parse_location(destination)

        if isinstance(parsed, LocalLocation):
            target = parsed.as_path()
            if target.resolve() == source.resolve():
                return str(parsed)
            owned = self.owns(source)

            def _place() -> None:
                target.parent.mkdir(parents=True, exist_ok=True)
                if owned:
                    shutil.move(str(source), str(target))
                else:
                    shutil.copyfile(source, target)

            await asyncio.to_thread(_place)
            if owned:
                self._scratch.discard(source)
            logger.info("Saved output to %s", target)
            return str(parsed)

        backend = self.backend_for(parsed)
        uri = await backend.upload_file(parsed, source, content_type or content_type_for(parsed.key))
        self.release(source)
        return uri

    async def store(
        self,
        data: bytes,
        destination: "str | StorageLocation",
        content_type: str | None = None,
    ) -> str:
        """Write in-memory output bytes to ``destination``."""

        parsed = parse_location(destination)
        backend = self.backend_for(parsed)
        return await backend.upload(parsed, data, content_type or content_type_for(str(parsed)))

    async def get_url(self, location: "str | StorageLocation", ttl_seconds: Optional[int] = None) -> str:
        parsed = parse_location(location)
        backend = self.backend_for(parsed)
        if ttl_seconds is None:
            return await backend.get_url(parsed)
        return await backend.get_url(parsed, ttl_seconds)

    @asynccontextmanager
    async def scope(self) -> AsyncIterator["MediaWorkspace"]:
        workspace = MediaWorkspace(self)
        try:
            yield workspace
        finally:
            workspace.cleanup()


class MediaWorkspace:
    """Scratch files tracked for the lifetime of one tool call."""

    def __init__(self, resolver: MediaLocationResolver) -> None:
        self.resolver = resolver
        self._paths: list[Path] = []

    def _track(self, path: Path) -> Path:
        if self.resolver.owns(path):
            self._paths.append(path)
        return path

    async def resolve_input(self, location: "str | StorageLocation") -> Path:
        return self._track(await self.resolver.resolve_input(location))

    def scratch_path(self, suffix: str = "") -> Path:
        return self._track(self.resolver.scratch_path(suffix))

    def output_path(self, destination: "str | StorageLocation", default_suffix: str = "") -> Path:
        """Local path a tool should write to before delivery to ``destination``."""

        parsed = parse_location(destination)
        if isinstance(parsed, LocalLocation):
            path = parsed.as_path()
            path.parent.mkdir(parents=True, exist_ok=True)
            return path
        suffix = PurePosixPath(parsed.key).suffix or default_suffix
        return self.scratch_path(suffix)

    async def handle_output(
        self,
        local_path: Path,
        destination: "str | StorageLocation",
        content_type: str | None = None,
    ) -> str:
        return await self.resolver.handle_output(local_path, destination, content_type)

    async def store(self, data: bytes, destination: "str | StorageLocation", content_type: str | None = None) -> str:
        return await self.resolver.store(data, destination, content_type)

    def cleanup(self) -> int:
        removed = 0
        for path in self._paths:
            if self.resolver.release(path):
                removed += 1
        self._paths.clear()
        if removed:
            logger.debug("Removed %d scratch files", removed)
        return removed


def destination_for_index(destination: "str | StorageLocation", index: int, mime_type: str) -> StorageLocation:
    """Derive ``stem_{index}.ext`` from ``destination`` for multi-output requests."""

    parsed = parse_location(destination)
    name = PurePosixPath(parsed.path if isinstance(parsed, LocalLocation) else parsed.key)
    suffix = name.suffix or f".{extension_for_mime(mime_type)}"
    indexed = str(name.with_name(f"{name.stem}_{index}{suffix}"))
    if isinstance(parsed, RemoteLocation):
        return parsed.with_key(indexed)
    return LocalLocation(path=indexed, file_uri=parsed.file_uri)


__all__ = ["MediaLocationResolver", "MediaWorkspace", "destination_for_index"]
