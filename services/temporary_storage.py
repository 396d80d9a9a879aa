"""
Utility helpers for scratch files used while staging remote media locally.
Remote inputs are downloaded here before ffmpeg or a provider reads them and
tool outputs are written here before being uploaded.
"""

from __future__ import annotations

import asyncio
import logging
import os
import tempfile
from pathlib import Path

from config.storage import SCRATCH_DIR

logger = logging.getLogger(__name__)


def create_scratch_file(
    *,
    directory: Path = SCRATCH_DIR,
    suffix: str = "",
    prefix: str = "genmedia_",
) -> Path:
    """Reserve a unique empty file inside ``directory`` and return its path."""

    directory.mkdir(parents=True, exist_ok=True)
    fd, temp_path = tempfile.mkstemp(suffix=suffix or ".bin", prefix=prefix, dir=directory)
    os.close(fd)
    return Path(temp_path)


def remove_scratch_file(path: Path) -> bool:
    """Delete ``path`` if it still exists; return whether a file was removed."""

    try:
        path.unlink()
    except FileNotFoundError:
        return False
    except OSError as exc:
        logger.warning("Failed to remove scratch file %s: %s", path, exc)
        return False
    return True


async def write_scratch_file(data: bytes, *, directory: Path = SCRATCH_DIR, suffix: str = "") -> Path:
    """Write ``data`` to a new scratch file without blocking the event loop."""

    def _write() -> Path:
        path = create_scratch_file(directory=directory, suffix=suffix)
        path.write_bytes(data)
        return path

    return await asyncio.to_thread(_write)


__all__ = ["create_scratch_file", "remove_scratch_file", "write_scratch_file"]
