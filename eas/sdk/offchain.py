"""Off-chain attestations.

Signed EIP-712 Attestation messages that never touch the chain. Each carries
a UID derived from its own fields so it can be referenced like an on-chain
attestation.
"""

from __future__ import annotations

import logging
from typing import Any

from eas.sdk.delegated import DEFAULT_EAS_VERSION
from eas.sdk.hashing import get_offchain_uid
from eas.sdk.models import EIP712Request, SignedOffchainAttestation, TypedDataConfig, TypedDataField
from eas.sdk.typed_data import TypedDataHandler, TypedDataSigner

logger = logging.getLogger(__name__)

OFFCHAIN_DOMAIN_NAME = "EAS Attestation"

ATTESTATION_PRIMARY_TYPE = "Attestation"
ATTESTATION_TYPE = [
    TypedDataField(name="schema", type="bytes32"),
    TypedDataField(name="recipient", type="address"),
    TypedDataField(name="time", type="uint64"),
    TypedDataField(name="expirationTime", type="uint64"),
    TypedDataField(name="revocable", type="bool"),
    TypedDataField(name="refUID", type="bytes32"),
    TypedDataField(name="data", type="bytes"),
]


class Offchain(TypedDataHandler):
    """Typed-data handler for off-chain attestations."""

    def __init__(self, address: str, chain_id: int, version: str = DEFAULT_EAS_VERSION):
        super().__init__(
            TypedDataConfig(address=address, name=OFFCHAIN_DOMAIN_NAME, version=version, chain_id=chain_id)
        )

    def get_attestation_request(self, params: dict[str, Any]) -> EIP712Request:
        return EIP712Request(
            domain=self.get_domain_typed_data(),
            primary_type=ATTESTATION_PRIMARY_TYPE,
            types={ATTESTATION_PRIMARY_TYPE: ATTESTATION_TYPE},
            message=params,
        )

    @staticmethod
    def get_offchain_uid(params: dict[str, Any]) -> str:
        schema = params["schema"]
        if isinstance(schema, bytes):
            schema = "0x" + schema.hex()
        return get_offchain_uid(
            schema,
            params["recipient"],
            params["time"],
            params["expirationTime"],
            params["revocable"],
            params["refUID"],
            params["data"],
        )

    def sign_offchain_attestation(self, params: dict[str, Any], signer: TypedDataSigner) -> SignedOffchainAttestation:
        """Sign an off-chain attestation and attach its UID.

        Args:
            params: schema, recipient, time, expirationTime, revocable, refUID, data
            signer: Attester's signing capability

        Returns:
            Signed attestation envelope
        """
        uid = self.get_offchain_uid(params)
        response = self.sign_typed_data_request(params, self.get_attestation_request(params), signer)
        return SignedOffchainAttestation(**response.model_dump(), uid=uid)

    def verify_offchain_attestation_signature(self, attester: str, attestation: SignedOffchainAttestation) -> bool:
        """Verify the attester's signature and that the attached UID matches the message."""
        if not self.verify_typed_data_request_signature(attester, attestation):
            return False
        if attestation.primary_type != ATTESTATION_PRIMARY_TYPE:
            return False
        try:
            uid = self.get_offchain_uid(attestation.message)
        except (ValueError, KeyError, TypeError) as e:
            logger.debug("Rejecting off-chain attestation %s: %s", attestation.uid, e)
            return False
        return attestation.uid.lower() == uid
