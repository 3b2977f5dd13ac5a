"""Attachment storage backend for S3-compatible object stores (DigitalOcean Spaces)."""

from spaces_storage.backend import SpacesStorageBackend
from spaces_storage.backend_config import BackendConfiguration
from spaces_storage.config import Settings
from spaces_storage.exceptions import (
    ConfigurationError,
    DecryptionError,
    HasherFinalizedError,
    ObjectNotFoundError,
    SpacesStorageError,
    StorageIOError,
    StreamModeError,
)
from spaces_storage.hasher import ContentHasher
from spaces_storage.models import AttachmentDescriptor, AttachmentFile, StreamMode
from spaces_storage.options import BackendSettings, FieldError, ObjectAcl, Region, ValidationOutcome
from spaces_storage.plugin import PLUGIN_INFO, SpacesPlugin

__all__ = [
    "AttachmentDescriptor",
    "AttachmentFile",
    "BackendConfiguration",
    "BackendSettings",
    "ConfigurationError",
    "ContentHasher",
    "DecryptionError",
    "FieldError",
    "HasherFinalizedError",
    "ObjectAcl",
    "ObjectNotFoundError",
    "PLUGIN_INFO",
    "Region",
    "Settings",
    "SpacesPlugin",
    "SpacesStorageBackend",
    "SpacesStorageError",
    "StorageIOError",
    "StreamMode",
    "StreamModeError",
    "ValidationOutcome",
]
