"""Bindings for the deployed SchemaRegistry and EAS contracts.

Thin web3 wrappers: schema registration and reads from the registry,
attestation reads and EIP-712 helpers from the EAS contract. UIDs returned
by `register` are predicted client-side with the same derivation the
registry uses.
"""

from __future__ import annotations

import logging
from typing import Any

from eth_account.signers.local import LocalAccount
from eth_utils import to_checksum_address
from web3 import Web3
from web3.contract import Contract

from eas.sdk.errors import AttestationNotFoundError, SchemaNotFoundError
from eas.sdk.hashing import ZERO_ADDRESS, get_schema_uid, is_zero_bytes32, to_bytes32
from eas.sdk.models import Attestation, SchemaRecord

logger = logging.getLogger(__name__)

SCHEMA_REGISTRY_ABI: list[dict[str, Any]] = [
    {
        "inputs": [
            {"name": "schema", "type": "string"},
            {"name": "resolver", "type": "address"},
            {"name": "revocable", "type": "bool"},
        ],
        "name": "register",
        "outputs": [{"name": "", "type": "bytes32"}],
        "stateMutability": "nonpayable",
        "type": "function",
    },
    {
        "inputs": [{"name": "uid", "type": "bytes32"}],
        "name": "getSchema",
        "outputs": [
            {
                "components": [
                    {"name": "uid", "type": "bytes32"},
                    {"name": "resolver", "type": "address"},
                    {"name": "revocable", "type": "bool"},
                    {"name": "schema", "type": "string"},
                ],
                "name": "",
                "type": "tuple",
            }
        ],
        "stateMutability": "view",
        "type": "function",
    },
]

EAS_ABI: list[dict[str, Any]] = [
    {
        "inputs": [{"name": "uid", "type": "bytes32"}],
        "name": "getAttestation",
        "outputs": [
            {
                "components": [
                    {"name": "uid", "type": "bytes32"},
                    {"name": "schema", "type": "bytes32"},
                    {"name": "time", "type": "uint64"},
                    {"name": "expirationTime", "type": "uint64"},
                    {"name": "revocationTime", "type": "uint64"},
                    {"name": "refUID", "type": "bytes32"},
                    {"name": "recipient", "type": "address"},
                    {"name": "attester", "type": "address"},
                    {"name": "revocable", "type": "bool"},
                    {"name": "data", "type": "bytes"},
                ],
                "name": "",
                "type": "tuple",
            }
        ],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [{"name": "uid", "type": "bytes32"}],
        "name": "isAttestationValid",
        "outputs": [{"name": "", "type": "bool"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [{"name": "account", "type": "address"}],
        "name": "getNonce",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "getDomainSeparator",
        "outputs": [{"name": "", "type": "bytes32"}],
        "stateMutability": "view",
        "type": "function",
    },
]


def _hex(value: bytes) -> str:
    return "0x" + bytes(value).hex()


class _ContractClient:
    """Shared web3 plumbing: contract handle and transaction account."""

    abi: list[dict[str, Any]] = []

    def __init__(self, web3: Web3, address: str):
        if not web3:
            raise ValueError("Web3 client is required")
        if not address:
            raise ValueError("Contract address is required")

        self.web3 = web3
        self.address = to_checksum_address(address)
        self.contract: Contract = web3.eth.contract(address=self.address, abi=self.abi)
        self.account: LocalAccount | None = None

    def set_account(self, account: LocalAccount) -> None:
        """Set the account that signs state-changing transactions."""
        self.account = account

    def _send_transaction(self, fn: Any) -> bytes:
        """Build, sign and submit a contract call; wait for its receipt."""
        if not self.account:
            raise ValueError("Account not set. Call set_account() first.")

        sender = self.account.address
        tx = fn.build_transaction({"from": sender, "nonce": self.web3.eth.get_transaction_count(sender)})
        signed = self.account.sign_transaction(tx)
        tx_hash = self.web3.eth.send_raw_transaction(signed.raw_transaction)
        self.web3.eth.wait_for_transaction_receipt(tx_hash)
        return tx_hash


class SchemaRegistryClient(_ContractClient):
    """Client for the SchemaRegistry contract."""

    abi = SCHEMA_REGISTRY_ABI

    def register(self, schema: str, resolver: str = ZERO_ADDRESS, revocable: bool = True) -> str:
        """Register a schema and return its UID."""
        if not schema:
            raise ValueError("Schema required")

        uid = get_schema_uid(schema, resolver, revocable)
        self._submit_registration(schema, resolver, revocable)
        logger.info("Registered schema %s", uid)
        return uid

    def _submit_registration(self, schema: str, resolver: str, revocable: bool) -> None:
        fn = self.contract.functions.register(schema, to_checksum_address(resolver), revocable)
        self._send_transaction(fn)

    def get_schema(self, uid: str) -> SchemaRecord:
        """Read a schema record; raise SchemaNotFoundError for unknown UIDs."""
        if not uid:
            raise ValueError("Schema UID required")

        logger.debug("getSchema(%s) on %s", uid, self.address)
        raw = self.contract.functions.getSchema(to_bytes32(uid)).call()
        return self._parse_schema_record(raw, uid)

    def _parse_schema_record(self, raw: Any, uid: str) -> SchemaRecord:
        record_uid, resolver, revocable, schema = raw
        if is_zero_bytes32(record_uid):
            raise SchemaNotFoundError(uid)
        return SchemaRecord(uid=_hex(record_uid), resolver=resolver, revocable=revocable, schema=schema)


class EASClient(_ContractClient):
    """Client for the EAS contract."""

    abi = EAS_ABI

    def get_attestation(self, uid: str) -> Attestation:
        """Read an attestation; raise AttestationNotFoundError for unknown UIDs."""
        if not uid:
            raise ValueError("Attestation UID required")

        logger.debug("getAttestation(%s) on %s", uid, self.address)
        raw = self.contract.functions.getAttestation(to_bytes32(uid)).call()
        return self._parse_attestation(raw, uid)

    def _parse_attestation(self, raw: Any, uid: str) -> Attestation:
        (
            att_uid,
            schema_uid,
            time,
            expiration_time,
            revocation_time,
            ref_uid,
            recipient,
            attester,
            revocable,
            data,
        ) = raw
        if is_zero_bytes32(att_uid):
            raise AttestationNotFoundError(uid)
        return Attestation(
            uid=_hex(att_uid),
            schema_uid=_hex(schema_uid),
            time=time,
            expiration_time=expiration_time,
            revocation_time=revocation_time,
            ref_uid=_hex(ref_uid),
            recipient=recipient,
            attester=attester,
            revocable=revocable,
            data=_hex(data),
        )

    def is_attestation_valid(self, uid: str) -> bool:
        if not uid:
            raise ValueError("Attestation UID required")
        return bool(self.contract.functions.isAttestationValid(to_bytes32(uid)).call())

    def get_nonce(self, account: str) -> int:
        """Next delegated-request nonce of `account`."""
        return int(self.contract.functions.getNonce(to_checksum_address(account)).call())

    def get_domain_separator(self) -> str:
        """Domain separator as reported by the contract."""
        return _hex(self.contract.functions.getDomainSeparator().call())
