"""Content-Disposition helpers for presigned download URLs."""

from __future__ import annotations

import re
from urllib.parse import quote

DISPOSITIONS = frozenset({"inline", "attachment"})

_UNSAFE_ASCII = re.compile(r'[^\x20-\x7e]|["\\]')


def disposition_filename(name: str) -> str:
    """Return the filename parameter(s) for a Content-Disposition header.

    Non-ASCII names get an RFC 5987 `filename*` parameter next to an ASCII
    fallback for older clients.
    """
    name = (name or "").replace("\r", "").replace("\n", "")
    fallback = _UNSAFE_ASCII.sub("_", name) or "file"
    value = f'filename="{fallback}"'
    if name and fallback != name:
        value += f"; filename*=UTF-8''{quote(name, safe='')}"
    return value


def content_disposition(disposition: str, name: str) -> str:
    disposition = (disposition or "inline").strip().lower()
    if disposition not in DISPOSITIONS:
        raise ValueError(f"Unsupported disposition: {disposition!r} (expected inline/attachment)")
    return f"{disposition}; {disposition_filename(name)}"
