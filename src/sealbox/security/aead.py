"""Authenticated file encryption with optional associated data (AES-GCM).

On-disk layout of an encrypted file:

    ciphertext (same length as the plaintext) || MAC (mac_size bytes, 12 by default)

There is no header, length prefix or algorithm identifier: the nonce and the
configuration travel out of band. Associated data never appears in the
container; it is read from a separate file on both sides and must be
byte-identical for decryption to succeed. A missing or unreadable associated
data file is treated as "no associated data" and logged as a warning.

Channel ordering:
- encrypt: associated data is authenticated before any plaintext is submitted
- decrypt: MAC first (it is handed to the cipher up front), then associated
  data, then ciphertext; plaintext is released only after the MAC verifies

Nonces must never repeat under the same key. Nothing here keeps track of
used nonces; that is the caller's responsibility.
"""
from __future__ import annotations

import logging
import os
from typing import Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from sealbox.config import DEFAULT_CONFIG, CryptoConfig
from sealbox.core.exceptions import (
    AuthenticationFailureError,
    InvalidInputError,
    MalformedInputError,
)
from sealbox.core.files import read_all, read_optional, write_all
from .kdf import SymmetricKey

logger = logging.getLogger(__name__)

AES_KEY_LENGTHS = (16, 24, 32)


def generate_nonce(config: Optional[CryptoConfig] = None) -> bytes:
    """Return a random nonce of the length the codec expects (one AES block)."""
    config = config or DEFAULT_CONFIG
    return os.urandom(config.nonce_size)


class AeadCodec:
    """
    AES-GCM codec with a truncated MAC appended to the ciphertext.

    The codec is stateless apart from its configuration, so one instance can
    be shared. Keys must be :class:`SymmetricKey` objects from
    :func:`sealbox.security.kdf.derive_key`; raw bytes are refused.
    """

    def __init__(self, config: Optional[CryptoConfig] = None):
        self.config = config or DEFAULT_CONFIG

    @property
    def mac_size(self) -> int:
        return self.config.mac_size

    # ------------------------------------------------------------------
    # Argument checks
    # ------------------------------------------------------------------

    def _key_bytes(self, key: SymmetricKey) -> bytes:
        if not isinstance(key, SymmetricKey):
            raise InvalidInputError("Key must be a SymmetricKey produced by derive_key()")
        if key.wiped:
            raise InvalidInputError("Symmetric key has been wiped")
        if len(key) not in AES_KEY_LENGTHS:
            raise InvalidInputError(f"Key length {len(key)} is not a valid AES key length")
        return bytes(key)

    def _check_nonce(self, nonce: bytes) -> bytes:
        if not nonce or len(nonce) != self.config.nonce_size:
            raise InvalidInputError(
                f"Nonce must be {self.config.nonce_size} bytes, got {len(nonce) if nonce else 0}"
            )
        return bytes(nonce)

    # ------------------------------------------------------------------
    # Byte-level encryption
    # ------------------------------------------------------------------

    def encrypt_bytes(
        self, plaintext: bytes, key: SymmetricKey, nonce: bytes, aad: Optional[bytes] = None
    ) -> bytes:
        """Encrypt ``plaintext`` and return ``ciphertext || MAC``."""
        encryptor = Cipher(algorithms.AES(self._key_bytes(key)), modes.GCM(self._check_nonce(nonce))).encryptor()

        # Associated data must be complete before the first plaintext byte.
        if aad:
            encryptor.authenticate_additional_data(bytes(aad))

        ciphertext = encryptor.update(bytes(plaintext)) + encryptor.finalize()
        return ciphertext + encryptor.tag[: self.mac_size]

    def decrypt_bytes(
        self, message: bytes, key: SymmetricKey, nonce: bytes, aad: Optional[bytes] = None
    ) -> bytes:
        """
        Verify and decrypt a ``ciphertext || MAC`` message.

        Raises:
            MalformedInputError: the message is shorter than the MAC.
            AuthenticationFailureError: the MAC does not verify. No plaintext
                is returned in that case.
        """
        if len(message) < self.mac_size:
            raise MalformedInputError(
                f"Encrypted data is {len(message)} bytes, shorter than the {self.mac_size}-byte MAC"
            )
        split = len(message) - self.mac_size
        ciphertext, mac = bytes(message[:split]), bytes(message[split:])

        # MAC goes in first, with the cipher configuration.
        decryptor = Cipher(
            algorithms.AES(self._key_bytes(key)),
            modes.GCM(self._check_nonce(nonce), mac, min_tag_length=self.mac_size),
        ).decryptor()
        if aad:
            decryptor.authenticate_additional_data(bytes(aad))

        # update() output stays buffered here until finalize() has checked the MAC
        pending = decryptor.update(ciphertext)
        try:
            pending += decryptor.finalize()
        except InvalidTag as e:
            logger.warning("MAC verification failed; discarding %d decrypted bytes", len(pending))
            raise AuthenticationFailureError("Authentication failed (MAC mismatch)") from e
        return pending

    # ------------------------------------------------------------------
    # File-level encryption
    # ------------------------------------------------------------------

    def encrypt_file(self, in_path, out_path, key: SymmetricKey, nonce: bytes, aad_path=None) -> int:
        """
        Encrypt ``in_path`` into ``out_path``; returns the container size.

        ``aad_path`` is optional. If given but unreadable the file is encrypted
        without associated data. An unreadable ``in_path`` aborts the call and
        nothing is written.
        """
        aad = read_optional(aad_path)
        plaintext = read_all(in_path)
        container = self.encrypt_bytes(plaintext, key, nonce, aad)
        write_all(out_path, container)
        logger.info("Encrypted '%s' (%d bytes) -> '%s'", in_path, len(plaintext), out_path)
        return len(container)

    def decrypt_file(self, in_path, out_path, key: SymmetricKey, nonce: bytes, aad_path=None) -> int:
        """
        Decrypt ``in_path`` into ``out_path``; returns the plaintext size.

        ``out_path`` is only written once the MAC has verified.
        """
        message = read_all(in_path)
        if len(message) < self.mac_size:
            raise MalformedInputError(
                f"'{in_path}' is {len(message)} bytes, shorter than the {self.mac_size}-byte MAC"
            )
        aad = read_optional(aad_path)
        plaintext = self.decrypt_bytes(message, key, nonce, aad)
        write_all(out_path, plaintext)
        logger.info("Decrypted '%s' -> '%s' (%d bytes)", in_path, out_path, len(plaintext))
        return len(plaintext)


# module-level default codec
_default_codec = AeadCodec()


def get_codec() -> AeadCodec:
    return _default_codec


def encrypt_file(in_path, out_path, key: SymmetricKey, nonce: bytes, aad_path=None) -> int:
    return get_codec().encrypt_file(in_path, out_path, key, nonce, aad_path=aad_path)


def decrypt_file(in_path, out_path, key: SymmetricKey, nonce: bytes, aad_path=None) -> int:
    return get_codec().decrypt_file(in_path, out_path, key, nonce, aad_path=aad_path)
