"""Storage locations: a local path or an object in a remote bucket.

``str(parse_location(value)) == value`` for every accepted ``value``.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Union

from core.exceptions import InvalidLocationError

REMOTE_SCHEMES = ("gs", "s3")
_FILE_PREFIX = "file://"


@dataclass(frozen=True, slots=True)
class LocalLocation:
    path: str
    file_uri: bool = False

    @property
    def is_remote(self) -> bool:
        return False

    def as_path(self) -> Path:
        return Path(self.path).expanduser()

    @property
    def name(self) -> str:
        return PurePosixPath(self.path).name

    def __str__(self) -> str:
        return f"{_FILE_PREFIX}{self.path}" if self.file_uri else self.path


@dataclass(frozen=True, slots=True)
class RemoteLocation:
    scheme: str
    bucket: str
    key: str

    @property
    def is_remote(self) -> bool:
        return True

    @property
    def name(self) -> str:
        return PurePosixPath(self.key).name

    def with_key(self, key: str) -> "RemoteLocation":
        return RemoteLocation(self.scheme, self.bucket, key)

    def __str__(self) -> str:
        return f"{self.scheme}://{self.bucket}/{self.key}"


StorageLocation = Union[LocalLocation, RemoteLocation]


def parse_location(value: "str | StorageLocation") -> StorageLocation:
    """Parse a path or ``scheme://bucket/key`` URI."""

    if isinstance(value, (LocalLocation, RemoteLocation)):
        return value
    if not isinstance(value, str) or not value.strip():
        raise InvalidLocationError("Storage location cannot be empty", location=str(value))

    if value.startswith(_FILE_PREFIX):
        path = value[len(_FILE_PREFIX):]
        if not path:
            raise InvalidLocationError("file:// location has no path", location=value)
        return LocalLocation(path=path, file_uri=True)

    if "://" not in value:
        return LocalLocation(path=value)

    scheme, _, remainder = value.partition("://")
    if scheme not in REMOTE_SCHEMES:
        raise InvalidLocationError(
            f"Unsupported storage scheme '{scheme}'. Supported: {list(REMOTE_SCHEMES)}",
            location=value,
        )
    bucket, separator, key = remainder.partition("/")
    if not bucket:
        raise InvalidLocationError(f"{scheme}:// location is missing a bucket name", location=value)
    if not separator or not key:
        raise InvalidLocationError(
            f"{scheme}:// location must look like {scheme}://bucket/object",
            location=value,
        )
    return RemoteLocation(scheme=scheme, bucket=bucket, key=key)


def is_remote(value: "str | StorageLocation") -> bool:
    return parse_location(value).is_remote


__all__ = [
    "LocalLocation",
    "REMOTE_SCHEMES",
    "RemoteLocation",
    "StorageLocation",
    "is_remote",
    "parse_location",
]
