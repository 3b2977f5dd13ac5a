"""Backend configuration shared by all storage backend instances."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError
from pydantic import ValidationError

from spaces_storage.client import client_error_code, create_s3_client
from spaces_storage.config import Settings
from spaces_storage.crypto import SecretStore
from spaces_storage.error_codes import ACCESS_DENIED_CODES, NO_SUCH_BUCKET_CODES
from spaces_storage.exceptions import ConfigurationError
from spaces_storage.options import (
    BackendSettings,
    FieldError,
    ObjectAcl,
    Region,
    ValidationOutcome,
    field_errors_from,
)

logger = logging.getLogger(__name__)

ClientFactory = Callable[..., Any]


@dataclass(frozen=True)
class BackendConfiguration:
    """Validated plugin settings plus the means to decrypt the stored secret.

    Instances are immutable; saving new settings goes through
    `validate_and_persist`, which returns the values to persist and leaves
    this object untouched.
    """

    stored: BackendSettings | None
    secrets: SecretStore
    settings: Settings = field(default_factory=Settings)
    client_factory: ClientFactory = create_s3_client

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        stored: BackendSettings | Mapping[str, Any] | None,
        namespace: str,
        *,
        client_factory: ClientFactory = create_s3_client,
    ) -> "BackendConfiguration":
        if stored is not None and not isinstance(stored, BackendSettings):
            stored = BackendSettings.model_validate(dict(stored))
        return cls(
            stored=stored,
            secrets=SecretStore(settings.secret_salt, namespace),
            settings=settings,
            client_factory=client_factory,
        )

    def _require_stored(self) -> BackendSettings:
        if self.stored is None:
            raise ConfigurationError("Spaces storage backend is not configured")
        return self.stored

    @property
    def namespace(self) -> str:
        return self.secrets.namespace

    @property
    def bucket(self) -> str:
        return self._require_stored().bucket

    @property
    def region(self) -> Region:
        return self._require_stored().region

    @property
    def endpoint(self) -> str:
        return self.endpoint_for(self.region)

    def endpoint_for(self, region: Region | str) -> str:
        value = region.value if isinstance(region, Region) else str(region)
        return f"https://{value}.{self.settings.provider_domain}"

    @property
    def acl(self) -> ObjectAcl:
        return self._require_stored().acl

    @property
    def access_key(self) -> str:
        return self._require_stored().access_key

    @property
    def secret_key(self) -> str:
        """Decrypt the stored secret; raises DecryptionError on malformed input."""
        return self.secrets.decrypt(self._require_stored().secret_key)

    def create_client(self) -> Any:
        secret = self.secret_key
        if not secret:
            raise ConfigurationError("Secret access key is not configured")
        return self.client_factory(
            self.endpoint,
            self.access_key,
            secret,
            settings=self.settings,
        )

    def validate_and_persist(self, candidate: Mapping[str, Any]) -> ValidationOutcome:
        """Check submitted settings against the store and return what to persist.

        Problems the operator can fix are reported as field or form errors.
        A bucket probe failure other than "access denied" or "no such bucket"
        raises ConfigurationError. The candidate secret is only ever returned
        encrypted, and only when validation passed; otherwise the previously
        stored token is kept.
        """
        stored_secret = self.stored.secret_key if self.stored is not None else ""
        raw = dict(candidate)
        submitted = str(raw.pop("secret-key", None) or raw.get("secret_key") or "").strip()
        raw["secret_key"] = submitted

        try:
            parsed = BackendSettings.model_validate(raw)
        except ValidationError as exc:
            raw["secret_key"] = stored_secret
            errors = field_errors_from(exc)
            logger.info("spaces settings rejected (fields=%s)", sorted({str(e.field) for e in errors}))
            return ValidationOutcome(raw, errors)

        errors: list[FieldError] = []
        secret = submitted or self.secrets.decrypt(stored_secret)
        if not secret:
            errors.append(FieldError("secret_key", "Secret access key is required"))
        else:
            errors.extend(self._probe_bucket(parsed, secret))

        if not errors and submitted:
            persisted_secret = self.secrets.encrypt(submitted)
        else:
            persisted_secret = stored_secret

        accepted = parsed.model_copy(update={"secret_key": persisted_secret}).model_dump(mode="json")
        if errors:
            logger.info(
                "spaces settings rejected (bucket=%s, errors=%d)", parsed.bucket, len(errors)
            )
        else:
            logger.info(
                "spaces settings accepted (bucket=%s, region=%s)", parsed.bucket, parsed.region.value
            )
        return ValidationOutcome(accepted, errors)

    def _probe_bucket(self, candidate: BackendSettings, secret: str) -> list[FieldError]:
        client = self.client_factory(
            self.endpoint_for(candidate.region),
            candidate.access_key,
            secret,
            settings=self.settings,
        )
        try:
            client.head_bucket(Bucket=candidate.bucket)
        except ClientError as exc:
            code = client_error_code(exc)
            if code in ACCESS_DENIED_CODES:
                return [FieldError(None, "User does not have access to the bucket.")]
            if code in NO_SUCH_BUCKET_CODES:
                return [FieldError("bucket", "Bucket does not exist")]
            raise ConfigurationError(
                f"Unable to verify bucket {candidate.bucket!r} (code={code or 'unknown'})"
            ) from exc
        except BotoCoreError as exc:
            raise ConfigurationError(f"Unable to reach {self.endpoint_for(candidate.region)}: {exc}") from exc
        return []
