"""Keyless integrity digests over one file or an ordered list of files.

A digest file holds the raw digest bytes (64 bytes for the default SHA-512)
with no header, encoding or trailing newline. Multi-file digests are computed
over the concatenation of the files in the order given, so reordering the
inputs changes the digest.
"""

import hashlib
import hmac
import logging
from pathlib import Path
from typing import Iterable, Optional, Sequence

from sealbox.config import DEFAULT_CONFIG, CryptoConfig
from sealbox.core.exceptions import DigestMismatchError, InvalidInputError, IoFailureError
from sealbox.core.files import read_all, write_all

logger = logging.getLogger(__name__)

CHUNK_SIZE = 65536  # 64KB


def _as_list(paths) -> list:
    if isinstance(paths, (str, Path)):
        return [paths]
    paths = list(paths)
    if not paths:
        raise InvalidInputError("At least one input file is required")
    return paths


def calculate_digest_bytes(data: bytes, config: Optional[CryptoConfig] = None) -> bytes:
    config = config or DEFAULT_CONFIG
    return hashlib.new(config.digest_algorithm, data).digest()


def calculate_digest(paths: Iterable, config: Optional[CryptoConfig] = None) -> bytes:
    """
    Calculate the digest over the concatenated contents of ``paths``.

    A single path (``str`` or ``Path``) is treated as a one-element list.
    Files are fed in order through one hash object, which gives the same
    result as hashing the joined bytes.
    """
    config = config or DEFAULT_CONFIG
    h = hashlib.new(config.digest_algorithm)
    for path in _as_list(paths):
        try:
            with open(path, "rb") as f:
                while True:
                    data = f.read(CHUNK_SIZE)
                    if not data:
                        break
                    h.update(data)
        except OSError as e:
            raise IoFailureError(f"Error reading file '{path}': {e}") from e
    return h.digest()


def create_digest(paths: Sequence, output_path, config: Optional[CryptoConfig] = None) -> bytes:
    """Compute the digest of ``paths`` and write it verbatim to ``output_path``."""
    paths = _as_list(paths)
    digest = calculate_digest(paths, config)
    write_all(output_path, digest)
    logger.info("Wrote digest of %d file(s) to '%s'", len(paths), output_path)
    return digest


def verify_digest(paths: Sequence, digest_path, config: Optional[CryptoConfig] = None) -> bool:
    """
    Recompute the digest of ``paths`` and compare it with ``digest_path``.

    Returns True on an exact match. A mismatch (including a digest file of
    the wrong length) raises :class:`DigestMismatchError`.
    """
    paths = _as_list(paths)
    expected = read_all(digest_path)
    actual = calculate_digest(paths, config)
    if not hmac.compare_digest(actual, expected):
        logger.warning("Digest mismatch for %s against '%s'", [str(p) for p in paths], digest_path)
        raise DigestMismatchError(f"Digest in '{digest_path}' does not match the input files")
    return True


def create_file_digest(path, output_path, config: Optional[CryptoConfig] = None) -> bytes:
    return create_digest([path], output_path, config)


def verify_file_digest(path, digest_path, config: Optional[CryptoConfig] = None) -> bool:
    return verify_digest([path], digest_path, config)
