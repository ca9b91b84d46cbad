"""Delegated attestation and revocation requests.

An attester signs an Attest or Revoke request off-chain; anyone can then
submit it to the EAS contract, which checks the signature against its own
EIP-712 domain.
"""

from __future__ import annotations

from typing import Any

from eth_utils import keccak

from eas.sdk.models import EIP712Request, EIP712Response, TypedDataConfig, TypedDataField
from eas.sdk.typed_data import TypedDataHandler, TypedDataSigner

EAS_DOMAIN_NAME = "EAS"
DEFAULT_EAS_VERSION = "0.26"

ATTEST_PRIMARY_TYPE = "Attest"
ATTEST_TYPED_SIGNATURE = (
    "Attest(bytes32 schema,address recipient,uint64 expirationTime,bool revocable,"
    "bytes32 refUID,bytes data,uint256 nonce)"
)
ATTEST_TYPE = [
    TypedDataField(name="schema", type="bytes32"),
    TypedDataField(name="recipient", type="address"),
    TypedDataField(name="expirationTime", type="uint64"),
    TypedDataField(name="revocable", type="bool"),
    TypedDataField(name="refUID", type="bytes32"),
    TypedDataField(name="data", type="bytes"),
    TypedDataField(name="nonce", type="uint256"),
]

REVOKE_PRIMARY_TYPE = "Revoke"
REVOKE_TYPED_SIGNATURE = "Revoke(bytes32 schema,bytes32 uid,uint256 nonce)"
REVOKE_TYPE = [
    TypedDataField(name="schema", type="bytes32"),
    TypedDataField(name="uid", type="bytes32"),
    TypedDataField(name="nonce", type="uint256"),
]


class Delegated(TypedDataHandler):
    """Typed-data handler for the EAS contract's delegated entry points."""

    def __init__(self, address: str, chain_id: int, version: str = DEFAULT_EAS_VERSION):
        super().__init__(TypedDataConfig(address=address, name=EAS_DOMAIN_NAME, version=version, chain_id=chain_id))

    def get_attest_type_hash(self) -> bytes:
        return keccak(text=ATTEST_TYPED_SIGNATURE)

    def get_revoke_type_hash(self) -> bytes:
        return keccak(text=REVOKE_TYPED_SIGNATURE)

    def get_attest_request(self, params: dict[str, Any]) -> EIP712Request:
        return EIP712Request(
            domain=self.get_domain_typed_data(),
            primary_type=ATTEST_PRIMARY_TYPE,
            types={ATTEST_PRIMARY_TYPE: ATTEST_TYPE},
            message=params,
        )

    def get_revoke_request(self, params: dict[str, Any]) -> EIP712Request:
        return EIP712Request(
            domain=self.get_domain_typed_data(),
            primary_type=REVOKE_PRIMARY_TYPE,
            types={REVOKE_PRIMARY_TYPE: REVOKE_TYPE},
            message=params,
        )

    def sign_delegated_attestation(self, params: dict[str, Any], signer: TypedDataSigner) -> EIP712Response:
        """Sign an Attest request.

        Args:
            params: schema, recipient, expirationTime, revocable, refUID, data, nonce
            signer: Attester's signing capability
        """
        return self.sign_typed_data_request(params, self.get_attest_request(params), signer)

    def verify_delegated_attestation_signature(self, attester: str, response: EIP712Response) -> bool:
        verified = self.verify_typed_data_request_signature(attester, response)
        return verified and response.primary_type == ATTEST_PRIMARY_TYPE

    def sign_delegated_revocation(self, params: dict[str, Any], signer: TypedDataSigner) -> EIP712Response:
        """Sign a Revoke request (params: schema, uid, nonce)."""
        return self.sign_typed_data_request(params, self.get_revoke_request(params), signer)

    def verify_delegated_revocation_signature(self, attester: str, response: EIP712Response) -> bool:
        verified = self.verify_typed_data_request_signature(attester, response)
        return verified and response.primary_type == REVOKE_PRIMARY_TYPE
