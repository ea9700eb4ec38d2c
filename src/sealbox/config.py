"""Algorithm configuration shared by the codec, key agreement and digest service."""

from __future__ import annotations

import hashlib
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.ciphers import algorithms

from sealbox.core.exceptions import InvalidInputError


CURVES = {
    "secp256r1": ec.SECP256R1,
    "secp384r1": ec.SECP384R1,
    "secp521r1": ec.SECP521R1,
}

# GCM tag lengths accepted by NIST SP 800-38D
MAC_SIZES = (4, 8, 12, 13, 14, 15, 16)

DEFAULT_CURVE = "secp256r1"
DEFAULT_MAC_SIZE = 12
DEFAULT_DIGEST = "sha512"
DEFAULT_KDF_HASH = "sha256"


@dataclass(frozen=True)
class CryptoConfig:
    """Algorithm parameters for one sealbox deployment.

    Defaults reproduce the reference configuration: P-256 agreement, a single
    SHA-256 pass for key derivation, AES-GCM with a 12-byte MAC and SHA-512
    file digests. Files written under one configuration can only be read back
    under the same one; nothing in the on-disk formats records it.
    """

    curve: str = DEFAULT_CURVE
    mac_size: int = DEFAULT_MAC_SIZE
    digest_algorithm: str = DEFAULT_DIGEST
    kdf_hash: str = DEFAULT_KDF_HASH

    def __post_init__(self):
        if self.curve not in CURVES:
            raise InvalidInputError(f"Unsupported curve: {self.curve!r}")
        if self.mac_size not in MAC_SIZES:
            raise InvalidInputError(f"Unsupported MAC size: {self.mac_size!r}")
        for name in (self.digest_algorithm, self.kdf_hash):
            if name not in hashlib.algorithms_available or name.startswith("shake"):
                raise InvalidInputError(f"Unsupported hash algorithm: {name!r}")
        if hashlib.new(self.kdf_hash).digest_size not in (16, 24, 32):
            raise InvalidInputError(f"{self.kdf_hash} does not produce an AES key length")

    @property
    def nonce_size(self) -> int:
        # one AES block
        return algorithms.AES.block_size // 8

    @property
    def digest_size(self) -> int:
        return hashlib.new(self.digest_algorithm).digest_size

    def curve_instance(self) -> ec.EllipticCurve:
        return CURVES[self.curve]()

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "CryptoConfig":
        """
        Build a config from ``SEALBOX_*`` environment variables.

        Recognised variables: ``SEALBOX_CURVE``, ``SEALBOX_MAC_SIZE``,
        ``SEALBOX_DIGEST`` and ``SEALBOX_KDF_HASH``. Unset variables keep the
        defaults.
        """
        env = os.environ if environ is None else environ
        mac_size = env.get("SEALBOX_MAC_SIZE")
        if mac_size is not None:
            try:
                mac_size = int(mac_size)
            except ValueError as e:
                raise InvalidInputError(f"SEALBOX_MAC_SIZE must be an integer, got {mac_size!r}") from e
        return cls(
            curve=env.get("SEALBOX_CURVE", DEFAULT_CURVE),
            mac_size=DEFAULT_MAC_SIZE if mac_size is None else mac_size,
            digest_algorithm=env.get("SEALBOX_DIGEST", DEFAULT_DIGEST),
            kdf_hash=env.get("SEALBOX_KDF_HASH", DEFAULT_KDF_HASH),
        )


DEFAULT_CONFIG = CryptoConfig()
