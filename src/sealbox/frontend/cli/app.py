"""
Command line front end for sealbox.

Usage:
    sealbox keygen --public-out alice.pub --private-out alice.key
    sealbox encrypt notes.txt notes.enc --private alice.key --peer-public bob.pub --nonce <32 hex chars> [--aad header.bin]
    sealbox decrypt notes.enc notes.txt --private bob.key --peer-public alice.pub --nonce <32 hex chars> [--aad header.bin]
    sealbox digest a.bin b.bin --output files.sha512
    sealbox verify a.bin b.bin --digest files.sha512

Algorithm parameters come from ``SEALBOX_*`` environment variables
(see :meth:`sealbox.config.CryptoConfig.from_env`).
Exit status is 0 on success and 1 when the operation fails.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Optional, Sequence

from sealbox.config import CryptoConfig
from sealbox.core.exceptions import SealboxError
from sealbox.core.files import read_all, write_all
from sealbox.core.hashing import create_digest, verify_digest
from sealbox.security.aead import AeadCodec
from sealbox.security.agreement import derive_shared_key, generate_keypair

from .logging_config import configure_logging

logger = logging.getLogger("sealbox.cli")


def _hex_bytes(value: str) -> bytes:
    try:
        return bytes.fromhex(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"not a hex string: {value!r}") from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sealbox", description="ECDH + AES-GCM file sealing")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    keygen = sub.add_parser("keygen", help="generate a key pair")
    keygen.add_argument("--public-out", required=True)
    keygen.add_argument("--private-out", required=True)

    for name in ("encrypt", "decrypt"):
        p = sub.add_parser(name, help=f"{name} a file with a key agreed with a peer")
        p.add_argument("input")
        p.add_argument("output")
        p.add_argument("--private", required=True, help="our raw private key file")
        p.add_argument("--peer-public", required=True, help="peer's raw public key file")
        p.add_argument("--nonce", required=True, type=_hex_bytes, help="nonce as hex; never reuse under one key")
        p.add_argument("--aad", default=None, help="file of associated data (authenticated, not encrypted)")

    digest = sub.add_parser("digest", help="write a digest over one or more files")
    digest.add_argument("inputs", nargs="+")
    digest.add_argument("--output", required=True)

    verify = sub.add_parser("verify", help="check files against a digest file")
    verify.add_argument("inputs", nargs="+")
    verify.add_argument("--digest", required=True)

    return parser


def _cmd_keygen(args, config: CryptoConfig) -> None:
    pair = generate_keypair(config)
    write_all(args.private_out, pair.private_key)
    write_all(args.public_out, pair.public_key)
    os.chmod(args.public_out, 0o644)
    print(pair.public_key.hex())


def _cmd_crypt(args, config: CryptoConfig) -> None:
    key = derive_shared_key(read_all(args.private), read_all(args.peer_public), config)
    codec = AeadCodec(config)
    try:
        if args.command == "encrypt":
            codec.encrypt_file(args.input, args.output, key, args.nonce, aad_path=args.aad)
        else:
            codec.decrypt_file(args.input, args.output, key, args.nonce, aad_path=args.aad)
    finally:
        key.wipe()


def _cmd_digest(args, config: CryptoConfig) -> None:
    print(create_digest(args.inputs, args.output, config).hex())


def _cmd_verify(args, config: CryptoConfig) -> None:
    verify_digest(args.inputs, args.digest, config)
    print("OK")


COMMANDS = {
    "keygen": _cmd_keygen,
    "encrypt": _cmd_crypt,
    "decrypt": _cmd_crypt,
    "digest": _cmd_digest,
    "verify": _cmd_verify,
}


# Main entry point
def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        config = CryptoConfig.from_env()
        COMMANDS[args.command](args, config)
    except SealboxError as e:
        logger.error("%s failed: %s", args.command, e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
