"""Plugin bootstrap: builds the shared configuration and registers the backend."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from spaces_storage.backend import SpacesStorageBackend
from spaces_storage.backend_config import BackendConfiguration, ClientFactory
from spaces_storage.client import create_s3_client
from spaces_storage.config import Settings
from spaces_storage.models import AttachmentDescriptor, RedirectSink
from spaces_storage.options import BackendSettings, FieldSpec, ValidationOutcome, get_options
from spaces_storage.utils.logging_setup import setup_logging

logger = logging.getLogger(__name__)

PLUGIN_INFO: dict[str, str] = {
    "id": "storage:do",
    "version": "1.0",
    "name": "Attachments in DigitalOcean Spaces",
    "description": "Stores attachments in DigitalOcean Spaces",
}

BackendFactory = Callable[..., SpacesStorageBackend]
Register = Callable[[str, BackendFactory], Any]


class SpacesPlugin:
    """Single-instance plugin wiring the backend into a host application."""

    multi_instance = False

    def __init__(
        self,
        settings: Settings,
        stored: BackendSettings | Mapping[str, Any] | None,
        namespace: str,
        *,
        client_factory: ClientFactory = create_s3_client,
    ) -> None:
        self.settings = settings
        self.config = BackendConfiguration.from_settings(
            settings, stored, namespace, client_factory=client_factory
        )

    def backend_factory(self) -> BackendFactory:
        def _factory(
            meta: AttachmentDescriptor,
            *,
            redirect: RedirectSink | None = None,
            client: Any | None = None,
        ) -> SpacesStorageBackend:
            return SpacesStorageBackend(meta, self.config, client=client, redirect=redirect)

        return _factory

    def bootstrap(self, register: Register) -> None:
        setup_logging(self.settings)
        register(SpacesStorageBackend.backend_id, self.backend_factory())
        logger.info(
            "spaces storage backend registered (id=%s, namespace=%s)",
            SpacesStorageBackend.backend_id,
            self.config.namespace,
        )

    def get_options(self) -> list[FieldSpec]:
        return get_options()

    def pre_save(self, candidate: Mapping[str, Any]) -> ValidationOutcome:
        """Validate submitted settings; accepted ones apply to backends created afterwards."""
        outcome = self.config.validate_and_persist(candidate)
        if outcome.ok:
            self.config = BackendConfiguration.from_settings(
                self.settings,
                outcome.settings,
                self.config.namespace,
                client_factory=self.config.client_factory,
            )
        return outcome
