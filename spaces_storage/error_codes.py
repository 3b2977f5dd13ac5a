"""Canonical error codes attached to storage failures."""

from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    UNKNOWN = "UNKNOWN"

    NOT_FOUND = "NOT_FOUND"
    NO_SUCH_BUCKET = "NO_SUCH_BUCKET"
    ACCESS_DENIED = "ACCESS_DENIED"

    READ_FAILED = "READ_FAILED"
    UPLOAD_FAILED = "UPLOAD_FAILED"
    DELETE_FAILED = "DELETE_FAILED"


# S3 reports HEAD failures with bare status codes, other calls with names.
NOT_FOUND_CODES = frozenset({"404", "NoSuchKey", "NotFound"})
NO_SUCH_BUCKET_CODES = frozenset({"404", "NoSuchBucket", "NotFound"})
ACCESS_DENIED_CODES = frozenset({"403", "AccessDenied", "Forbidden"})
