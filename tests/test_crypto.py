from __future__ import annotations

import pytest

from spaces_storage.crypto import SecretStore
from spaces_storage.exceptions import ConfigurationError, DecryptionError


def test_roundtrip_across_instances_with_same_salt_and_namespace() -> None:
    token = SecretStore("salt", "ns.1").encrypt("s3cr3t")
    assert token != "s3cr3t"
    assert SecretStore("salt", "ns.1").decrypt(token) == "s3cr3t"


def test_other_namespace_cannot_decrypt() -> None:
    token = SecretStore("salt", "ns.1").encrypt("s3cr3t")
    with pytest.raises(DecryptionError):
        SecretStore("salt", "ns.2").decrypt(token)


def test_malformed_token_raises() -> None:
    with pytest.raises(DecryptionError):
        SecretStore("salt", "ns").decrypt("not-a-token")


def test_blank_token_decrypts_to_blank() -> None:
    assert SecretStore("salt", "ns").decrypt("") == ""


def test_missing_salt_is_a_configuration_error() -> None:
    with pytest.raises(ConfigurationError):
        SecretStore("", "ns")
