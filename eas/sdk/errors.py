"""Exceptions raised by the EAS SDK."""

from __future__ import annotations


class EASError(Exception):
    """Base class for SDK errors."""


class NotFoundError(EASError, LookupError):
    """A queried record came back with the zero UID."""

    def __init__(self, kind: str, uid: str):
        super().__init__(f"{kind} not found: {uid}")
        self.uid = uid


class SchemaNotFoundError(NotFoundError):
    def __init__(self, uid: str):
        super().__init__("Schema", uid)


class AttestationNotFoundError(NotFoundError):
    def __init__(self, uid: str):
        super().__init__("Attestation", uid)


class InvalidAddressError(EASError, ValueError):
    """An address that can never identify a signer (empty, malformed or zero)."""


class InvalidSignatureError(EASError, ValueError):
    """A raw signature that cannot be split into r, s and v."""
