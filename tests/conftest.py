from __future__ import annotations

import base64
import hashlib
import io
from typing import Any

import pytest
from botocore.exceptions import ClientError

from spaces_storage.backend_config import BackendConfiguration
from spaces_storage.config import Settings
from spaces_storage.crypto import SecretStore
from spaces_storage.options import BackendSettings

NAMESPACE = "plugin.storage-do.instance.1"


def client_error(code: str, operation: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


class BrokenBody(io.BytesIO):
    """Streaming body whose reads fail with a transport error."""

    def __init__(self, exc: BaseException) -> None:
        super().__init__(b"")
        self.exc = exc

    def read(self, size: int | None = -1) -> bytes:
        raise self.exc


class FakeS3Client:
    """In-memory stand-in for the boto3 S3 client calls the backend makes."""

    def __init__(self, buckets: tuple[str, ...] = ("attachments",)) -> None:
        self.buckets = set(buckets)
        self.objects: dict[tuple[str, str], dict[str, Any]] = {}
        self.calls: list[tuple[str, dict[str, Any]]] = []
        # Operation name -> S3 error code, or a botocore exception to raise as is.
        self.failures: dict[str, str | BaseException] = {}
        self.broken_bodies: dict[str, BaseException] = {}

    def _check(self, operation: str, kwargs: dict[str, Any]) -> None:
        self.calls.append((operation, kwargs))
        failure = self.failures.get(operation)
        if isinstance(failure, BaseException):
            raise failure
        if failure:
            raise client_error(failure, operation)

    def head_bucket(self, **kwargs: Any) -> dict[str, Any]:
        self._check("HeadBucket", kwargs)
        if kwargs["Bucket"] not in self.buckets:
            raise client_error("404", "HeadBucket")
        return {}

    def get_object(self, **kwargs: Any) -> dict[str, Any]:
        self._check("GetObject", kwargs)
        obj = self.objects.get((kwargs["Bucket"], kwargs["Key"]))
        if obj is None:
            raise client_error("NoSuchKey", "GetObject")
        if kwargs["Key"] in self.broken_bodies:
            return {"Body": BrokenBody(self.broken_bodies[kwargs["Key"]])}
        data = obj["Body"]
        rng = kwargs.get("Range")
        if rng:
            start = int(rng.removeprefix("bytes=").rstrip("-"))
            if start >= len(data):
                raise client_error("InvalidRange", "GetObject")
            data = data[start:]
        return {"Body": io.BytesIO(data), "ContentType": obj["ContentType"]}

    def put_object(self, **kwargs: Any) -> dict[str, Any]:
        self._check("PutObject", kwargs)
        data = kwargs["Body"].read()
        md5 = kwargs.get("ContentMD5")
        if md5 and md5 != base64.b64encode(hashlib.md5(data).digest()).decode("ascii"):
            raise client_error("BadDigest", "PutObject")
        self.objects[(kwargs["Bucket"], kwargs["Key"])] = {**kwargs, "Body": data}
        return {"ETag": f'"{hashlib.md5(data).hexdigest()}"'}

    def delete_object(self, **kwargs: Any) -> dict[str, Any]:
        self._check("DeleteObject", kwargs)
        if self.objects.pop((kwargs["Bucket"], kwargs["Key"]), None) is None:
            raise client_error("NoSuchKey", "DeleteObject")
        return {}


@pytest.fixture()
def settings() -> Settings:
    return Settings(secret_salt="unit-test-salt", staging_max_memory=1024)


@pytest.fixture()
def secret_store(settings: Settings) -> SecretStore:
    return SecretStore(settings.secret_salt, NAMESPACE)


@pytest.fixture()
def stored(secret_store: SecretStore) -> BackendSettings:
    return BackendSettings(
        bucket="attachments",
        region="nyc3",
        acl="private",
        access_key="DO00EXAMPLEKEY",
        secret_key=secret_store.encrypt("stored-secret"),
    )


@pytest.fixture()
def fake_s3() -> FakeS3Client:
    return FakeS3Client()


@pytest.fixture()
def factory_calls() -> list[tuple[str, str, str]]:
    return []


@pytest.fixture()
def config(
    settings: Settings,
    stored: BackendSettings,
    fake_s3: FakeS3Client,
    factory_calls: list[tuple[str, str, str]],
) -> BackendConfiguration:
    def _factory(endpoint: str, access_key: str, secret_key: str, **kwargs: Any) -> FakeS3Client:
        factory_calls.append((endpoint, access_key, secret_key))
        return fake_s3

    return BackendConfiguration.from_settings(settings, stored, NAMESPACE, client_factory=_factory)
