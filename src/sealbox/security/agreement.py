"""Elliptic-curve Diffie-Hellman key pairs and shared-secret agreement.

Key encodings:
- public key: uncompressed SEC1 point ``0x04 || X || Y`` (65 bytes on P-256)
- private key: big-endian scalar padded to the curve's byte length (32 bytes on P-256)

Both parties must use the same curve; it is not recorded anywhere.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from sealbox.config import DEFAULT_CONFIG, CryptoConfig
from sealbox.core.exceptions import AgreementFailureError, InvalidInputError
from .kdf import SymmetricKey, derive_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeyPair:
    """A public/private key pair owned by the caller.

    The private key is excluded from ``repr`` so it never ends up in logs.
    """

    public_key: bytes
    private_key: bytes = field(repr=False)
    curve: str = DEFAULT_CONFIG.curve


def _private_key_length(curve: ec.EllipticCurve) -> int:
    return (curve.key_size + 7) // 8


def generate_keypair(config: Optional[CryptoConfig] = None) -> KeyPair:
    """Generate a fresh key pair on the configured curve.

    Randomness comes from the OS CSPRNG through OpenSSL; failures there
    propagate unchanged.
    """
    config = config or DEFAULT_CONFIG
    curve = config.curve_instance()
    private = ec.generate_private_key(curve)
    public_bytes = private.public_key().public_bytes(
        encoding=serialization.Encoding.X962,
        format=serialization.PublicFormat.UncompressedPoint,
    )
    private_bytes = private.private_numbers().private_value.to_bytes(_private_key_length(curve), "big")
    logger.debug("Generated %s key pair", config.curve)
    return KeyPair(public_key=public_bytes, private_key=private_bytes, curve=config.curve)


def _load_private_key(private_key: bytes, curve: ec.EllipticCurve) -> ec.EllipticCurvePrivateKey:
    if len(private_key) != _private_key_length(curve):
        raise AgreementFailureError(
            f"Private key must be {_private_key_length(curve)} bytes for {curve.name}, got {len(private_key)}"
        )
    value = int.from_bytes(private_key, "big")
    try:
        return ec.derive_private_key(value, curve)
    except ValueError as e:
        raise AgreementFailureError(f"Private key rejected: {e}") from e


def _load_public_key(public_key: bytes, curve: ec.EllipticCurve) -> ec.EllipticCurvePublicKey:
    # from_encoded_point checks the point is on the curve and not the identity
    try:
        return ec.EllipticCurvePublicKey.from_encoded_point(curve, public_key)
    except ValueError as e:
        raise AgreementFailureError(f"Peer public key rejected: {e}") from e


def agree(private_key: bytes, peer_public_key: bytes, config: Optional[CryptoConfig] = None) -> bytes:
    """
    Compute the ECDH shared secret between our private key and a peer's public key.

    Raises:
        InvalidInputError: either key is empty.
        AgreementFailureError: a key is not valid for the curve, or the
            agreement itself is rejected.
    """
    if not peer_public_key:
        raise InvalidInputError("Other party's public key is empty")
    if not private_key:
        raise InvalidInputError("Private key is empty")

    config = config or DEFAULT_CONFIG
    curve = config.curve_instance()
    private = _load_private_key(bytes(private_key), curve)
    public = _load_public_key(bytes(peer_public_key), curve)
    try:
        return private.exchange(ec.ECDH(), public)
    except ValueError as e:
        raise AgreementFailureError(f"Key agreement failed: {e}") from e


def derive_shared_key(
    private_key: bytes, peer_public_key: bytes, config: Optional[CryptoConfig] = None
) -> SymmetricKey:
    """Run :func:`agree` and hash the result into a :class:`SymmetricKey`."""
    config = config or DEFAULT_CONFIG
    shared_secret = bytearray(agree(private_key, peer_public_key, config))
    try:
        return derive_key(shared_secret, config.kdf_hash)
    finally:
        # best-effort overwrite of our copy of the secret
        for i in range(len(shared_secret)):
            shared_secret[i] = 0
