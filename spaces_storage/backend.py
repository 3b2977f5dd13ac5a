"""Attachment storage backend that keeps file contents in a Spaces bucket."""

from __future__ import annotations

import io
import logging
import os
import tempfile
from collections.abc import Callable
from typing import IO, Any, BinaryIO

from botocore.exceptions import BotoCoreError, ClientError

from spaces_storage.backend_config import BackendConfiguration
from spaces_storage.client import client_error_code
from spaces_storage.disposition import content_disposition
from spaces_storage.error_codes import NOT_FOUND_CODES, ErrorCode
from spaces_storage.exceptions import (
    ConfigurationError,
    ObjectNotFoundError,
    StorageIOError,
    StreamModeError,
)
from spaces_storage.hasher import ContentHasher
from spaces_storage.models import AttachmentDescriptor, RedirectSink, StreamMode

logger = logging.getLogger(__name__)

Sink = Callable[[bytes], Any] | IO[bytes]


class SpacesStorageBackend:
    """Read/write one attachment file against the configured bucket.

    An instance is bound to a single attachment and used for one access:
    either reading (the first `read` opens a streaming GET) or writing
    (the first `write` opens a staging buffer that `flush` uploads). Mixing
    the two on one instance raises StreamModeError.
    """

    backend_id = "S"
    description = "DigitalOcean Spaces"

    # Matches the default socket buffer size.
    block_size = 8192

    cache_control = "private, max-age=86400"
    default_redirect_ttl = 24 * 3600
    hash_algos = ("md5",)

    def __init__(
        self,
        meta: AttachmentDescriptor,
        config: BackendConfiguration,
        *,
        client: Any | None = None,
        redirect: RedirectSink | None = None,
    ) -> None:
        self.meta = meta
        self.config = config
        self.redirect_sink = redirect
        self.hasher = ContentHasher()
        self.mode = StreamMode.UNOPENED

        self._client = client
        self._body: Any | None = None
        self._position = 0
        self._staging: BinaryIO | None = None

    @property
    def key(self) -> str:
        return self.meta.key

    def _ensure_client(self) -> Any:
        if self._client is not None:
            return self._client
        self._client = self.config.create_client()
        return self._client

    def _enter(self, mode: StreamMode) -> None:
        if self.mode is StreamMode.CLOSED:
            raise StreamModeError(f"{self.key}: storage backend is closed")
        if self.mode is not StreamMode.UNOPENED and self.mode is not mode:
            raise StreamModeError(
                f"{self.key}: cannot switch to {mode.value} while {self.mode.value}"
            )
        self.mode = mode

    # Reading

    def _open_body(self, offset: int = 0) -> Any:
        client = self._ensure_client()
        params: dict[str, Any] = {"Bucket": self.config.bucket, "Key": self.key}
        if offset > 0:
            params["Range"] = f"bytes={offset}-"

        try:
            resp = client.get_object(**params)
        except ClientError as exc:
            code = client_error_code(exc)
            if code in NOT_FOUND_CODES:
                raise ObjectNotFoundError(self.key) from exc
            if code == "InvalidRange":
                # Offset at or past the end of the object.
                resp = {"Body": io.BytesIO(b"")}
            else:
                logger.warning("spaces get failed (key=%s, code=%s)", self.key, code)
                raise StorageIOError(
                    self.key, "Unable to read file", error_code=ErrorCode.READ_FAILED
                ) from exc
        except BotoCoreError as exc:
            logger.warning("spaces get failed (key=%s): %s", self.key, exc)
            raise StorageIOError(
                self.key, "Unable to read file", error_code=ErrorCode.READ_FAILED
            ) from exc

        self._close_body()
        self._body = resp["Body"]
        self._position = offset
        logger.debug("spaces object opened (key=%s, offset=%d)", self.key, offset)
        return self._body

    def read(self, size: int = 0, offset: int = 0) -> bytes:
        """Return up to `size` bytes (default `block_size`).

        `offset=0` continues from the current position. A positive offset
        that differs from the current position reopens the object with a
        range request starting there. A short (or empty) result means the
        end of the object was reached.
        """
        self._enter(StreamMode.READING)
        body = self._body
        if body is None or (offset > 0 and offset != self._position):
            body = self._open_body(offset)

        size = size or self.block_size
        chunks: list[bytes] = []
        received = 0
        while received < size:
            try:
                buf = body.read(size - received)
            except BotoCoreError as exc:
                raise StorageIOError(
                    self.key, "Unable to read file", error_code=ErrorCode.READ_FAILED
                ) from exc
            if not buf:
                break
            chunks.append(buf)
            received += len(buf)

        self._position += received
        return b"".join(chunks)

    def passthru(self, sink: Sink) -> int:
        """Copy the whole object into `sink` (a binary writer or a callable)."""
        emit = sink.write if hasattr(sink, "write") else sink
        total = 0
        while True:
            block = self.read()
            if not block:
                break
            emit(block)
            total += len(block)
        return total

    # Writing

    def write(self, block: bytes) -> int:
        self._enter(StreamMode.WRITING)
        if self._staging is None:
            self._staging = self._new_staging()
        self.hasher.update(block)
        self._staging.write(block)
        return len(block)

    def _new_staging(self) -> BinaryIO:
        return tempfile.SpooledTemporaryFile(  # type: ignore[return-value]
            max_size=self.config.settings.staging_max_memory, mode="w+b"
        )

    def flush(self) -> bool:
        """Upload everything written so far; the instance is closed afterwards."""
        self._enter(StreamMode.WRITING)
        staging = self._staging if self._staging is not None else self._new_staging()
        self._staging = None
        try:
            return self.upload(staging)
        finally:
            staging.close()
            self.mode = StreamMode.CLOSED

    def upload(self, source: BinaryIO | str | os.PathLike[str]) -> bool:
        """PUT the object from a staged stream or from a local file path.

        A staged stream was hashed while it was written; a file path is
        hashed here in a single pass before it is sent. The digest of a file
        upload only replaces the instance's hasher once the PUT succeeded, so
        a failed upload can be retried.
        """
        self._enter(StreamMode.WRITING)
        if isinstance(source, (str, os.PathLike)):
            if self._staging is not None:
                raise StreamModeError(f"{self.key}: cannot upload a file over pending writes")
            hasher = ContentHasher()
            hasher.update_file(source)
            with open(source, "rb") as body:
                body.seek(0)
                self._put(body, hasher)
            self.hasher = hasher
            return True

        source.seek(0)
        return self._put(source, self.hasher)

    def _put(self, body: BinaryIO, hasher: ContentHasher) -> bool:
        client = self._ensure_client()
        params: dict[str, Any] = {
            "Bucket": self.config.bucket,
            "Key": self.key,
            "Body": body,
            "ContentType": self.meta.content_type or "application/octet-stream",
            "CacheControl": self.cache_control,
            "ACL": self.config.acl.value,
        }
        content_md5 = hasher.content_md5()
        if content_md5:
            params["ContentMD5"] = content_md5

        try:
            client.put_object(**params)
        except (ClientError, BotoCoreError) as exc:
            logger.warning("spaces upload failed (key=%s): %s", self.key, exc)
            raise StorageIOError(
                self.key, "Unable to upload file", error_code=ErrorCode.UPLOAD_FAILED
            ) from exc

        logger.info("spaces object uploaded (key=%s, md5=%s)", self.key, hasher.digest())
        return True

    # Other capabilities

    def unlink(self) -> bool:
        """Delete the object. Failures are never treated as success."""
        client = self._ensure_client()
        try:
            client.delete_object(Bucket=self.config.bucket, Key=self.key)
        except ClientError as exc:
            code = client_error_code(exc)
            logger.warning("spaces delete failed (key=%s, code=%s)", self.key, code)
            error_code = ErrorCode.NOT_FOUND if code in NOT_FOUND_CODES else ErrorCode.DELETE_FAILED
            raise StorageIOError(self.key, "Unable to delete file", error_code=error_code) from exc
        except BotoCoreError as exc:
            logger.warning("spaces delete failed (key=%s): %s", self.key, exc)
            raise StorageIOError(
                self.key, "Unable to delete file", error_code=ErrorCode.DELETE_FAILED
            ) from exc

        logger.info("spaces object deleted (key=%s)", self.key)
        return True

    def get_native_hash_algos(self) -> list[str]:
        return list(self.hash_algos)

    def get_hash_digest(self, algo: str) -> str:
        if algo not in self.hash_algos:
            return ""
        return self.hasher.digest()

    def get_redirect_url(self, disposition: str = "inline", ttl: int | None = None) -> str:
        """Presign a GET for this object, valid for `ttl` seconds (default one day)."""
        client = self._ensure_client()
        expires_in = int(ttl) if ttl else self.default_redirect_ttl
        params = {
            "Bucket": self.config.bucket,
            "Key": self.key,
            "ResponseContentDisposition": content_disposition(disposition, self.meta.name),
        }
        try:
            return str(
                client.generate_presigned_url("get_object", Params=params, ExpiresIn=expires_in)
            )
        except (ClientError, BotoCoreError) as exc:
            raise StorageIOError(self.key, "Unable to sign download URL") from exc

    def send_redirect_url(self, disposition: str = "inline", ttl: int | None = None) -> None:
        """Redirect the client to a presigned URL; the instance is closed afterwards."""
        if self.redirect_sink is None:
            raise ConfigurationError("No redirect handler was given to the storage backend")
        if self.mode is StreamMode.CLOSED:
            raise StreamModeError(f"{self.key}: storage backend is closed")
        url = self.get_redirect_url(disposition, ttl)
        self.close()
        self.redirect_sink.redirect(url)

    # Lifecycle

    def _close_body(self) -> None:
        if self._body is not None:
            close = getattr(self._body, "close", None)
            if close is not None:
                close()
            self._body = None

    def close(self) -> None:
        self._close_body()
        if self._staging is not None:
            self._staging.close()
            self._staging = None
        self.mode = StreamMode.CLOSED

    def __enter__(self) -> "SpacesStorageBackend":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()
