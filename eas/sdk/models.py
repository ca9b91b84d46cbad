"""Pydantic models for EAS data structures.

Records read from the SchemaRegistry and EAS contracts, the immutable
typed-data domain config, and the EIP-712 request/response envelopes.
Envelopes serialize with the camelCase names EIP-712 tooling expects.
"""

from __future__ import annotations

from typing import Any, Literal

from eth_utils import is_address, to_checksum_address
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from eas.sdk.hashing import ZERO_BYTES32

TypedDataType = Literal[
    "bool",
    "uint8",
    "uint16",
    "uint32",
    "uint64",
    "uint128",
    "uint256",
    "address",
    "string",
    "bytes",
    "bytes32",
]


class SchemaRecord(BaseModel):
    """Schema as stored in the SchemaRegistry."""

    uid: str = Field(..., description="Schema UID (bytes32 hex)")
    resolver: str = Field(..., description="Resolver contract address")
    revocable: bool = Field(default=True, description="Whether attestations can be revoked")
    schema_: str = Field(..., alias="schema", description="Schema definition string")

    model_config = ConfigDict(populate_by_name=True)


class Attestation(BaseModel):
    """Attestation as stored in the EAS contract."""

    uid: str = Field(..., description="Attestation UID")
    schema_uid: str = Field(..., description="Referenced schema UID")
    time: int = Field(..., description="Creation time (seconds)")
    expiration_time: int = Field(default=0, description="Expiration time, 0 for none")
    revocation_time: int = Field(default=0, description="Revocation time, 0 if not revoked")
    ref_uid: str = Field(default=ZERO_BYTES32, description="Referenced attestation UID")
    recipient: str = Field(..., description="Recipient address")
    attester: str = Field(..., description="Attester address")
    revocable: bool = Field(default=True)
    data: str = Field(default="0x", description="Encoded payload (hex)")

    @property
    def revoked(self) -> bool:
        return self.revocation_time != 0


class TypedDataConfig(BaseModel):
    """Identifies exactly one EIP-712 signing domain."""

    address: str = Field(..., description="Verifying contract address")
    name: str
    version: str
    chain_id: int = Field(..., ge=0)

    model_config = ConfigDict(frozen=True)

    @field_validator("address")
    @classmethod
    def validate_address(cls, v: str) -> str:
        """Require a well-formed address and store it checksummed."""
        if not is_address(v):
            raise ValueError(f"Invalid verifying contract address: {v}")
        return to_checksum_address(v)


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DomainTypedData(_CamelModel):
    name: str
    version: str
    chain_id: int
    verifying_contract: str


class TypedDataField(BaseModel):
    name: str
    type: TypedDataType


class Signature(BaseModel):
    r: str
    s: str
    v: int


class EIP712Request(_CamelModel):
    """Unsigned EIP-712 envelope.

    `types` holds the message types only; the EIP712Domain type is implied
    by `domain`.
    """

    domain: DomainTypedData
    primary_type: str
    types: dict[str, list[TypedDataField]]
    message: dict[str, Any]

    def type_definitions(self) -> dict[str, list[dict[str, str]]]:
        """Plain-dict copy of the message types."""
        return {name: [f.model_dump() for f in fields] for name, fields in self.types.items()}

    def to_typed_data(self, domain: DomainTypedData | None = None) -> dict[str, Any]:
        """Full EIP-712 structure, optionally under a different domain."""
        domain = domain or self.domain
        return {
            "types": {"EIP712Domain": EIP712_DOMAIN_FIELDS, **self.type_definitions()},
            "primaryType": self.primary_type,
            "domain": domain.model_dump(by_alias=True),
            "message": dict(self.message),
        }


class EIP712Response(EIP712Request):
    """EIP-712 envelope after signing."""

    signature: Signature


class SignedOffchainAttestation(EIP712Response):
    """Signed off-chain attestation with its derived UID."""

    uid: str


EIP712_DOMAIN_FIELDS = [
    {"name": "name", "type": "string"},
    {"name": "version", "type": "string"},
    {"name": "chainId", "type": "uint256"},
    {"name": "verifyingContract", "type": "address"},
]
