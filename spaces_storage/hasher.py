"""Incremental MD5 digest for attachment content."""

from __future__ import annotations

import base64
import hashlib
import os
from typing import BinaryIO

from spaces_storage.exceptions import HasherFinalizedError

_FILE_CHUNK_SIZE = 8192


class ContentHasher:
    """Accumulates an MD5 digest over everything fed to it.

    The host stores the hex digest in its integrity field, so the output is
    the empty string until at least one update happened. The final value is
    memoized; feeding more data after `digest()` returned a value raises
    `HasherFinalizedError`.
    """

    algorithm = "md5"

    def __init__(self) -> None:
        self._ctx = hashlib.md5()
        self._has_data = False
        self._final: str | None = None

    @property
    def has_data(self) -> bool:
        return self._has_data

    def _ensure_open(self) -> None:
        if self._final is not None:
            raise HasherFinalizedError("digest already finalized")

    def update(self, data: bytes) -> None:
        self._ensure_open()
        self._has_data = True
        self._ctx.update(data)

    def update_file(self, source: str | os.PathLike[str] | BinaryIO) -> None:
        """Feed the whole content of a file path or open binary handle."""
        self._ensure_open()
        self._has_data = True
        if isinstance(source, (str, os.PathLike)):
            with open(source, "rb") as f:
                self._consume(f)
        else:
            self._consume(source)

    def _consume(self, f: BinaryIO) -> None:
        while True:
            chunk = f.read(_FILE_CHUNK_SIZE)
            if not chunk:
                break
            self._ctx.update(chunk)

    def digest(self) -> str:
        if not self._has_data:
            return ""
        if self._final is None:
            self._final = self._ctx.hexdigest()
        return self._final

    def content_md5(self) -> str:
        """Return the digest in the base64 form used by the Content-MD5 header."""
        hex_digest = self.digest()
        if not hex_digest:
            return ""
        return base64.b64encode(bytes.fromhex(hex_digest)).decode("ascii")
