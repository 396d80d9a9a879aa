"""Storage locations, backends and the media location resolver."""

from __future__ import annotations

import logging
from typing import Dict, Optional

import httpx

from core.auth.tokens import TokenProvider, build_token_provider
from core.config import Settings

from .base import StorageBackend
from .gcs import GCSStorageBackend
from .local import LocalStorageBackend
from .locations import (
    REMOTE_SCHEMES,
    LocalLocation,
    RemoteLocation,
    StorageLocation,
    is_remote,
    parse_location,
)
from .resolver import MediaLocationResolver, MediaWorkspace, destination_for_index
from .s3 import S3StorageBackend

logger = logging.getLogger(__name__)


def build_location_resolver(
    settings: Settings,
    *,
    token_provider: Optional[TokenProvider] = None,
    http_client: Optional[httpx.AsyncClient] = None,
    s3_client=None,
) -> MediaLocationResolver:
    """Create a resolver with every remote backend registered.

    Credentials are only looked up on first use, so a process without GCP or
    AWS credentials still starts and serves local paths.
    """

    backends: Dict[str, StorageBackend] = {
        "gs": GCSStorageBackend(token_provider or build_token_provider(), http_client=http_client),
        "s3": S3StorageBackend(s3_client, region=settings.aws_region),
    }
    logger.info("Storage backends: %s (scratch=%s)", sorted(backends), settings.scratch_dir)
    return MediaLocationResolver(backends, scratch_dir=settings.scratch_dir)


__all__ = [
    "GCSStorageBackend",
    "LocalLocation",
    "LocalStorageBackend",
    "MediaLocationResolver",
    "MediaWorkspace",
    "REMOTE_SCHEMES",
    "RemoteLocation",
    "S3StorageBackend",
    "StorageBackend",
    "StorageLocation",
    "build_location_resolver",
    "destination_for_index",
    "is_remote",
    "parse_location",
]
