"""Shared-secret to symmetric-key derivation.

The derivation is a single hash pass over the raw shared secret, with no salt
and no context label. It is kept for compatibility with keys and ciphertexts
produced by the original tool; a deployment free of that constraint should
use HKDF with a salt and an ``info`` label instead.
"""
import hashlib

from sealbox.config import DEFAULT_KDF_HASH
from sealbox.core.exceptions import InvalidInputError


class SymmetricKey:
    """AEAD key material produced by :func:`derive_key`.

    The bytes live in a mutable buffer so the holder can zero them with
    :meth:`wipe` once the key is no longer needed.
    """

    def __init__(self, material: bytes):
        if not material:
            raise InvalidInputError("Symmetric key material is empty")
        self._material = bytearray(material)
        self._wiped = False

    def __len__(self) -> int:
        return len(self._material)

    def __bytes__(self) -> bytes:
        if self._wiped:
            raise InvalidInputError("Symmetric key has been wiped")
        return bytes(self._material)

    def __eq__(self, other):
        if not isinstance(other, SymmetricKey):
            return NotImplemented
        return self._material == other._material

    __hash__ = None

    def __repr__(self) -> str:
        state = "wiped" if self._wiped else f"{len(self._material) * 8} bits"
        return f"SymmetricKey(<{state}>)"

    @property
    def wiped(self) -> bool:
        return self._wiped

    def wipe(self) -> None:
        """Overwrite the key bytes with zeros; the key is unusable afterwards."""
        for i in range(len(self._material)):
            self._material[i] = 0
        self._wiped = True


def derive_key(shared_secret: bytes, hash_name: str = DEFAULT_KDF_HASH) -> SymmetricKey:
    """
    Derive a symmetric key by hashing the shared secret once.
    Returns a key of the hash's digest size (32 bytes for SHA-256).
    """
    if not shared_secret:
        raise InvalidInputError("Shared secret is empty")
    return SymmetricKey(hashlib.new(hash_name, bytes(shared_secret)).digest())
