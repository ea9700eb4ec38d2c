"""Security helpers: key agreement, key derivation and AEAD file encryption for sealbox.

This package provides:
- ECDH key pair generation and shared-secret agreement
- single-hash derivation of a symmetric key from the shared secret
- AES-GCM file encryption/decryption with optional associated data
"""

from .kdf import SymmetricKey, derive_key
from .agreement import KeyPair, generate_keypair, agree, derive_shared_key
from .aead import AeadCodec, generate_nonce, get_codec, encrypt_file, decrypt_file

__all__ = [
    "SymmetricKey",
    "derive_key",
    "KeyPair",
    "generate_keypair",
    "agree",
    "derive_shared_key",
    "AeadCodec",
    "generate_nonce",
    "get_codec",
    "encrypt_file",
    "decrypt_file",
]
