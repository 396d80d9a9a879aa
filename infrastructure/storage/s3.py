"""Amazon S3 storage backend built on boto3."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError

from config.aws import S3_PRESIGN_MAX_SECONDS
from config.storage import DEFAULT_URL_TTL_SECONDS
from core.exceptions import (
    InvalidLocationError,
    StorageAuthError,
    StorageError,
    StorageNotFoundError,
    StorageOperationError,
)
from core.utils.media import content_type_for
from infrastructure.aws.clients import get_s3_client
from infrastructure.storage.base import StorageBackend
from infrastructure.storage.locations import RemoteLocation, StorageLocation

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound", "NoSuchBucket"}
_AUTH_CODES = {"403", "AccessDenied", "InvalidAccessKeyId", "SignatureDoesNotMatch", "ExpiredToken"}


def _remote(location: StorageLocation) -> RemoteLocation:
    if not isinstance(location, RemoteLocation) or location.scheme != "s3":
        raise InvalidLocationError(f"{location} is not an s3:// location", location=str(location))
    return location


def _translate(exc: Exception, location: RemoteLocation, operation: str) -> StorageError:
    if isinstance(exc, NoCredentialsError):
        return StorageAuthError(f"AWS credentials not configured: {exc}", location=str(location), operation=operation)
    if isinstance(exc, ClientError):
        code = str(exc.response.get("Error", {}).get("Code", ""))
        if code in _NOT_FOUND_CODES:
            return StorageNotFoundError(f"S3 object not found: {location}", location=str(location), operation=operation)
        if code in _AUTH_CODES:
            return StorageAuthError(
                f"S3 denied {operation} on {location} ({code})",
                location=str(location),
                operation=operation,
            )
    return StorageOperationError(
        f"S3 {operation} failed for {location}: {exc}",
        location=str(location),
        operation=operation,
        original_error=exc,
    )


class S3StorageBackend(StorageBackend):
    """Blocking boto3 calls are pushed to worker threads."""

    scheme = "s3"

    def __init__(self, s3_client: Any | None = None, *, region: str | None = None) -> None:
        self._client = s3_client
        self._region = region

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = get_s3_client(self._region)
        return self._client

    async def upload(self, location: StorageLocation, data: bytes, content_type: str | None = None) -> str:
        remote = _remote(location)
        try:
            await asyncio.to_thread(
                self.client.put_object,
                Bucket=remote.bucket,
                Key=remote.key,
                Body=data,
                ContentType=content_type or content_type_for(remote.key),
            )
        except (BotoCoreError, ClientError) as exc:
            raise _translate(exc, remote, "upload") from exc
        logger.info("Uploaded %d bytes to %s", len(data), remote)
        return str(remote)

    async def download(self, location: StorageLocation) -> bytes:
        remote = _remote(location)

        def _read() -> bytes:
            response = self.client.get_object(Bucket=remote.bucket, Key=remote.key)
            return response["Body"].read()

        try:
            data = await asyncio.to_thread(_read)
        except (BotoCoreError, ClientError) as exc:
            raise _translate(exc, remote, "download") from exc
        logger.info("Downloaded %d bytes from %s", len(data), remote)
        return data

    async def exists(self, location: StorageLocation) -> bool:
        remote = _remote(location)
        try:
            await asyncio.to_thread(self.client.head_object, Bucket=remote.bucket, Key=remote.key)
        except (BotoCoreError, ClientError) as exc:
            error = _translate(exc, remote, "exists")
            if isinstance(error, StorageNotFoundError):
                return False
            raise error from exc
        return True

    async def get_url(self, location: StorageLocation, ttl_seconds: int = DEFAULT_URL_TTL_SECONDS) -> str:
        remote = _remote(location)
        # SigV4 presigned URLs expire after seven days at most
        ttl_seconds = max(1, min(int(ttl_seconds), S3_PRESIGN_MAX_SECONDS))
        try:
            return await asyncio.to_thread(
                self.client.generate_presigned_url,
                "get_object",
                Params={"Bucket": remote.bucket, "Key": remote.key},
                ExpiresIn=ttl_seconds,
            )
        except (BotoCoreError, ClientError) as exc:
            raise _translate(exc, remote, "get_url") from exc

    async def delete(self, location: StorageLocation) -> None:
        remote = _remote(location)
        try:
            await asyncio.to_thread(self.client.delete_object, Bucket=remote.bucket, Key=remote.key)
        except (BotoCoreError, ClientError) as exc:
            raise _translate(exc, remote, "delete") from exc


__all__ = ["S3StorageBackend"]
