"""Spaces storage exception hierarchy."""

from __future__ import annotations

from spaces_storage.error_codes import ErrorCode


class SpacesStorageError(Exception):
    """Base error for the Spaces storage backend."""


class ConfigurationError(SpacesStorageError):
    """Raised when backend configuration or credentials are unusable."""


class DecryptionError(ConfigurationError):
    """Raised when a stored secret cannot be decrypted."""


class StorageIOError(SpacesStorageError):
    """Raised when an object-store operation on a key fails."""

    def __init__(
        self,
        key: str,
        message: str,
        *,
        error_code: ErrorCode | str | None = None,
    ) -> None:
        super().__init__(f"{key}: {message}")
        self.key = key
        self.message = message
        self.error_code = error_code


class ObjectNotFoundError(StorageIOError):
    """Raised when the requested object does not exist."""

    def __init__(self, key: str, message: str = "Unable to locate file") -> None:
        super().__init__(key, message, error_code=ErrorCode.NOT_FOUND)


class StreamModeError(SpacesStorageError):
    """Raised when a backend instance is used in the wrong stream mode."""


class HasherFinalizedError(SpacesStorageError):
    """Raised when data is fed to a hasher after its digest was taken."""
