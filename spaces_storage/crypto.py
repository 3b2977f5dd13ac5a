"""Symmetric encryption for credentials stored in plugin settings."""

from __future__ import annotations

import base64

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from spaces_storage.exceptions import ConfigurationError, DecryptionError


class SecretStore:
    """Encrypts values under a key derived from a process salt and a namespace.

    The same salt and namespace always derive the same key, so a value
    encrypted by one process can be decrypted by any other sharing the salt.
    """

    def __init__(self, salt: str, namespace: str) -> None:
        if not salt:
            raise ConfigurationError("secret salt is not configured (SPACES_SECRET_SALT)")
        self.namespace = namespace
        kdf = HKDF(
            algorithm=hashes.SHA256(),
            length=32,
            salt=salt.encode("utf-8"),
            info=namespace.encode("utf-8"),
        )
        key = kdf.derive(salt.encode("utf-8"))
        self._fernet = Fernet(base64.urlsafe_b64encode(key))

    def encrypt(self, plaintext: str) -> str:
        return self._fernet.encrypt(plaintext.encode("utf-8")).decode("ascii")

    def decrypt(self, token: str) -> str:
        if not token:
            return ""
        try:
            return self._fernet.decrypt(token.encode("ascii")).decode("utf-8")
        except (InvalidToken, UnicodeError, ValueError) as exc:
            raise DecryptionError(
                f"Unable to decrypt stored secret (namespace={self.namespace!r})"
            ) from exc
