"""Shared test fixtures data: deterministic keys, addresses and request params."""

from __future__ import annotations

from typing import Any

from eth_account import Account
from eth_account.signers.local import LocalAccount

from eas.sdk.hashing import ZERO_BYTES32

# Well-known development keys (hardhat/anvil accounts 0 and 1)
SIGNER_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
OTHER_KEY = "0x59c6995e998f97a5a0044966f0945389dc9e86dae88c7a8412f4603b6b78690d"

RECIPIENT = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
ATTESTER = "0x3C44CdDdB6a900fa2b585dd299e03d12FA4293BC"
OTHER_ADDRESS = "0x90F79bf6EB2c4f870365E785982E1f101E93b906"

EAS_ADDRESS = "0xC2679fBD37d54388Ce493F1DB75320D236e1815e"
REGISTRY_ADDRESS = "0x0a7E2Ff54e76B8E6659aedc9103FB21c038050D0"
CHAIN_ID = 11155111

SCHEMA_UID = "0x" + "ab" * 32


def signer_account() -> LocalAccount:
    return Account.from_key(SIGNER_KEY)


def other_account() -> LocalAccount:
    return Account.from_key(OTHER_KEY)


def offchain_params(**overrides: Any) -> dict[str, Any]:
    """Off-chain Attestation message with sensible defaults."""
    params: dict[str, Any] = {
        "schema": SCHEMA_UID,
        "recipient": RECIPIENT,
        "time": 1669299342,
        "expirationTime": 0,
        "revocable": True,
        "refUID": ZERO_BYTES32,
        "data": "0x1234",
    }
    params.update(overrides)
    return params


def attest_params(**overrides: Any) -> dict[str, Any]:
    """Delegated Attest message with sensible defaults."""
    params: dict[str, Any] = {
        "schema": SCHEMA_UID,
        "recipient": RECIPIENT,
        "expirationTime": 0,
        "revocable": True,
        "refUID": ZERO_BYTES32,
        "data": "0x1234",
        "nonce": 0,
    }
    params.update(overrides)
    return params
