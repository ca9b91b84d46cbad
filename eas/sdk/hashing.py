"""Deterministic UID derivation for schemas and attestations.

UIDs are keccak256 over the packed ABI encoding of their fields, in the exact
order the SchemaRegistry and EAS contracts use, so a UID can be predicted
client-side before the on-chain record exists.
"""

from __future__ import annotations

from eth_abi.packed import encode_packed
from eth_utils import keccak, to_bytes, to_checksum_address

ZERO_ADDRESS = "0x" + "00" * 20
ZERO_BYTES32 = "0x" + "00" * 32

ATTESTATION_UID_TYPES = [
    "bytes",
    "address",
    "address",
    "uint64",
    "uint64",
    "bool",
    "bytes32",
    "bytes",
    "uint32",
]
SCHEMA_UID_TYPES = ["string", "address", "bool"]


def keccak_hex(data: bytes) -> str:
    """Keccak-256 of raw bytes as a 0x-prefixed hex string."""
    return "0x" + keccak(data).hex()


def to_bytes32(value: str | bytes) -> bytes:
    """Convert a 0x hex string (or raw bytes) into exactly 32 bytes."""
    raw = value if isinstance(value, bytes) else to_bytes(hexstr=value)
    if len(raw) != 32:
        raise ValueError(f"Expected 32 bytes, got {len(raw)}")
    return raw


def to_data_bytes(value: str | bytes) -> bytes:
    """Convert attestation payload (hex string or bytes) into bytes."""
    if isinstance(value, bytes):
        return value
    return to_bytes(hexstr=value) if value else b""


def is_zero_bytes32(value: str | bytes) -> bool:
    """Check for the all-zero sentinel that marks a missing record."""
    return not any(to_bytes32(value))


def get_uid(
    schema: str,
    recipient: str,
    attester: str,
    time: int,
    expiration_time: int,
    revocable: bool,
    ref_uid: str | bytes,
    data: str | bytes,
    bump: int,
) -> str:
    """Derive an attestation UID.

    Args:
        schema: Schema string (hashed as its UTF-8 bytes)
        recipient: Recipient address
        attester: Attester address
        time: Creation time (uint64 seconds)
        expiration_time: Expiration time (uint64 seconds, 0 for none)
        revocable: Whether the attestation can be revoked
        ref_uid: Referenced attestation UID (zero bytes32 for none)
        data: Attestation payload
        bump: Caller-supplied discriminant (uint32) for otherwise identical inputs

    Returns:
        0x-prefixed hex UID
    """
    encoded = encode_packed(
        ATTESTATION_UID_TYPES,
        [
            schema.encode("utf-8"),
            to_checksum_address(recipient),
            to_checksum_address(attester),
            int(time),
            int(expiration_time),
            bool(revocable),
            to_bytes32(ref_uid),
            to_data_bytes(data),
            int(bump),
        ],
    )
    return keccak_hex(encoded)


def get_schema_uid(schema: str, resolver: str, revocable: bool) -> str:
    """Derive the UID the SchemaRegistry assigns to a schema."""
    encoded = encode_packed(
        SCHEMA_UID_TYPES,
        [schema, to_checksum_address(resolver), bool(revocable)],
    )
    return keccak_hex(encoded)


def get_offchain_uid(
    schema_uid: str,
    recipient: str,
    time: int,
    expiration_time: int,
    revocable: bool,
    ref_uid: str | bytes,
    data: str | bytes,
) -> str:
    """Derive the UID of an off-chain attestation.

    Off-chain attestations have no attester slot and are never bumped.
    """
    return get_uid(
        schema_uid,
        recipient,
        ZERO_ADDRESS,
        time,
        expiration_time,
        revocable,
        ref_uid,
        data,
        0,
    )
