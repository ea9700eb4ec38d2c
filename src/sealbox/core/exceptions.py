"""
Exceptions for the sealbox core and security modules
This is placed such that there is a general error catcher
"""


class SealboxError(Exception):
    # general container for errors
    pass


class InvalidInputError(SealboxError):
    # raised when a caller passes an empty or malformed in-memory argument
    pass


class MalformedInputError(SealboxError):
    # raised when an on-disk container is too short to hold a MAC
    pass


class AuthenticationFailureError(SealboxError):
    # raised when MAC verification fails; no plaintext is released
    pass


class AgreementFailureError(SealboxError):
    # raised when the key agreement rejects a private or peer public key
    pass


class DigestMismatchError(SealboxError):
    # raised on a digest mismatch during verification
    pass


class IoFailureError(SealboxError):
    # raised if a file cannot be opened, read or written
    pass
