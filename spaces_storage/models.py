"""Host-side collaborators the storage backend works against."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol, runtime_checkable


@runtime_checkable
class AttachmentDescriptor(Protocol):
    """Read-only view of the host's attachment record."""

    @property
    def key(self) -> str: ...

    @property
    def content_type(self) -> str: ...

    @property
    def name(self) -> str: ...


@dataclass(frozen=True)
class AttachmentFile:
    key: str
    content_type: str = "application/octet-stream"
    name: str = ""


class RedirectSink(Protocol):
    """The host HTTP layer's redirect hook."""

    def redirect(self, url: str) -> None: ...


class StreamMode(str, Enum):
    UNOPENED = "unopened"
    READING = "reading"
    WRITING = "writing"
    CLOSED = "closed"
