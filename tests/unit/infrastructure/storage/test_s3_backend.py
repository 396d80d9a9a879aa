"""Tests for the boto3-backed S3 storage backend."""

import io

import pytest
from botocore.exceptions import ClientError, NoCredentialsError

from core.exceptions import StorageAuthError, StorageNotFoundError, StorageOperationError
from infrastructure.storage.locations import parse_location
from infrastructure.storage.s3 import S3StorageBackend


def client_error(code: str, operation: str = "GetObject") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


class FakeS3Client:
    def __init__(self) -> None:
        self.objects: dict[tuple[str, str], bytes] = {}
        self.put_calls: list[dict] = []
        self.error: Exception | None = None

    def _maybe_fail(self):
        if self.error is not None:
            raise self.error

    def put_object(self, **kwargs):
        self._maybe_fail()
        self.put_calls.append(kwargs)
        self.objects[(kwargs["Bucket"], kwargs["Key"])] = kwargs["Body"]
        return {}

    def get_object(self, Bucket, Key):
        self._maybe_fail()
        try:
            return {"Body": io.BytesIO(self.objects[(Bucket, Key)])}
        except KeyError:
            raise client_error("NoSuchKey") from None

    def head_object(self, Bucket, Key):
        self._maybe_fail()
        if (Bucket, Key) not in self.objects:
            raise client_error("404", "HeadObject")
        return {}

    def generate_presigned_url(self, method, Params, ExpiresIn):
        return f"https://{Params['Bucket']}.s3.test/{Params['Key']}?method={method}&expires={ExpiresIn}"

    def delete_object(self, Bucket, Key):
        self._maybe_fail()
        self.objects.pop((Bucket, Key), None)


@pytest.mark.anyio("asyncio")
async def test_upload_download_round_trip_sets_content_type():
    client = FakeS3Client()
    backend = S3StorageBackend(client)
    location = parse_location("s3://bucket/renders/out.gif")

    assert await backend.upload(location, b"GIF89a") == "s3://bucket/renders/out.gif"
    assert client.put_calls[0]["ContentType"] == "image/gif"
    assert await backend.download(location) == b"GIF89a"


@pytest.mark.anyio("asyncio")
async def test_missing_key_is_not_found():
    backend = S3StorageBackend(FakeS3Client())

    with pytest.raises(StorageNotFoundError):
        await backend.download(parse_location("s3://bucket/missing.wav"))
    assert await backend.exists(parse_location("s3://bucket/missing.wav")) is False


@pytest.mark.anyio("asyncio")
@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (client_error("AccessDenied"), StorageAuthError),
        (NoCredentialsError(), StorageAuthError),
        (client_error("InternalError"), StorageOperationError),
    ],
)
async def test_errors_are_translated(error, expected):
    client = FakeS3Client()
    client.error = error
    backend = S3StorageBackend(client)

    with pytest.raises(expected):
        await backend.upload(parse_location("s3://bucket/a.wav"), b"x")


@pytest.mark.anyio("asyncio")
async def test_access_denied_on_exists_is_raised():
    client = FakeS3Client()
    client.error = client_error("403", "HeadObject")
    backend = S3StorageBackend(client)

    with pytest.raises(StorageAuthError):
        await backend.exists(parse_location("s3://bucket/a.wav"))


@pytest.mark.anyio("asyncio")
async def test_get_url_is_presigned():
    backend = S3StorageBackend(FakeS3Client())

    url = await backend.get_url(parse_location("s3://bucket/a.wav"), ttl_seconds=120)
    assert url == "https://bucket.s3.test/a.wav?method=get_object&expires=120"


def test_client_is_created_lazily(monkeypatch):
    from infrastructure.storage import s3 as s3_module

    created = []
    monkeypatch.setattr(s3_module, "get_s3_client", lambda region: created.append(region) or FakeS3Client())
    backend = S3StorageBackend(region="eu-west-1")

    assert created == []
    assert isinstance(backend.client, FakeS3Client)
    assert created == ["eu-west-1"]


@pytest.mark.anyio("asyncio")
async def test_get_url_clamps_ttl_to_presign_limit():
    backend = S3StorageBackend(FakeS3Client())

    url = await backend.get_url(parse_location("s3://bucket/a.wav"), ttl_seconds=30 * 24 * 3600)
    assert url.endswith(f"expires={7 * 24 * 3600}")
