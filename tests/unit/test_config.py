"""Unit tests for CryptoConfig."""

import pytest

from sealbox.config import DEFAULT_CONFIG, CryptoConfig
from sealbox.core.exceptions import InvalidInputError


def test_defaults():
    assert DEFAULT_CONFIG.curve == "secp256r1"
    assert DEFAULT_CONFIG.mac_size == 12
    assert DEFAULT_CONFIG.nonce_size == 16
    assert DEFAULT_CONFIG.digest_size == 64


def test_from_env_empty_mapping_uses_defaults():
    assert CryptoConfig.from_env({}) == DEFAULT_CONFIG


def test_from_env_overrides():
    config = CryptoConfig.from_env(
        {
            "SEALBOX_CURVE": "secp384r1",
            "SEALBOX_MAC_SIZE": "16",
            "SEALBOX_DIGEST": "sha256",
            "SEALBOX_KDF_HASH": "sha3_256",
        }
    )
    assert config.curve == "secp384r1"
    assert config.mac_size == 16
    assert config.digest_size == 32
    assert config.kdf_hash == "sha3_256"


def test_from_env_reads_os_environ(monkeypatch):
    monkeypatch.setenv("SEALBOX_MAC_SIZE", "13")
    assert CryptoConfig.from_env().mac_size == 13


def test_from_env_non_integer_mac_size():
    with pytest.raises(InvalidInputError, match="must be an integer"):
        CryptoConfig.from_env({"SEALBOX_MAC_SIZE": "twelve"})


@pytest.mark.parametrize("mac_size", [0, 3, 10, 17, 32])
def test_invalid_mac_size(mac_size):
    with pytest.raises(InvalidInputError, match="MAC size"):
        CryptoConfig(mac_size=mac_size)


def test_invalid_curve():
    with pytest.raises(InvalidInputError, match="curve"):
        CryptoConfig(curve="curve25519")


@pytest.mark.parametrize("name", ["not-a-hash", "shake_128"])
def test_invalid_digest_algorithm(name):
    with pytest.raises(InvalidInputError):
        CryptoConfig(digest_algorithm=name)


def test_kdf_hash_must_yield_aes_key_length():
    # SHA-512 output is 64 bytes, which AES cannot use
    with pytest.raises(InvalidInputError, match="AES key length"):
        CryptoConfig(kdf_hash="sha512")


def test_config_is_frozen():
    with pytest.raises(AttributeError):
        DEFAULT_CONFIG.mac_size = 16
