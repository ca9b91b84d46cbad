"""EIP-712 typed-data handling.

A TypedDataHandler is bound to one signing domain (verifying contract, chain,
name, version). It computes the domain separator, builds request envelopes,
asks an external signer to sign them and recovers signers from responses.
Signing keys are never owned here: any object with a `sign_typed_data`
method can act as the signer.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from eth_abi import encode
from eth_account import Account
from eth_account.messages import encode_typed_data
from eth_account.signers.local import LocalAccount
from eth_utils import is_address, keccak, to_bytes, to_checksum_address

from eas.sdk.errors import InvalidAddressError, InvalidSignatureError
from eas.sdk.hashing import keccak_hex
from eas.sdk.models import (
    DomainTypedData,
    EIP712Request,
    EIP712Response,
    Signature,
    TypedDataConfig,
)

logger = logging.getLogger(__name__)

EIP712_DOMAIN = "EIP712Domain(string name,string version,uint256 chainId,address verifyingContract)"


class TypedDataSigner(Protocol):
    """Signing capability: local key, hardware wallet, remote custody."""

    def sign_typed_data(
        self,
        domain: dict[str, Any],
        types: dict[str, list[dict[str, str]]],
        message: dict[str, Any],
    ) -> bytes | str:
        ...


class LocalTypedDataSigner:
    """TypedDataSigner backed by an in-process eth-account key."""

    def __init__(self, account: LocalAccount):
        if not account:
            raise ValueError("Account is required")
        self._account = account

    @classmethod
    def from_key(cls, private_key: str) -> LocalTypedDataSigner:
        return cls(Account.from_key(private_key))

    @property
    def address(self) -> str:
        return self._account.address

    def sign_typed_data(
        self,
        domain: dict[str, Any],
        types: dict[str, list[dict[str, str]]],
        message: dict[str, Any],
    ) -> bytes:
        message_types = {name: fields for name, fields in types.items() if name != "EIP712Domain"}
        signable = encode_typed_data(domain_data=domain, message_types=message_types, message_data=message)
        return bytes(self._account.sign_message(signable).signature)


def split_signature(raw_signature: bytes | str) -> Signature:
    """Split an r || s || v signature into its components.

    64-byte EIP-2098 compact signatures (r || vs) are expanded, with v taken
    from the top bit of vs.
    """
    try:
        raw = raw_signature if isinstance(raw_signature, bytes) else to_bytes(hexstr=raw_signature)
    except ValueError as e:
        raise InvalidSignatureError(f"Signature is not valid hex: {e}") from e
    if len(raw) == 64:
        vs = bytearray(raw[32:])
        v = 27 + (vs[0] >> 7)
        vs[0] &= 0x7F
        return Signature(r="0x" + raw[:32].hex(), s="0x" + bytes(vs).hex(), v=v)
    if len(raw) != 65:
        raise InvalidSignatureError(f"Signature must be 64 or 65 bytes, got {len(raw)}")

    v = raw[64]
    if v < 27:
        v += 27
    return Signature(r="0x" + raw[:32].hex(), s="0x" + raw[32:64].hex(), v=v)


def join_signature(signature: Signature) -> bytes:
    """Inverse of split_signature."""
    r = to_bytes(hexstr=signature.r)
    s = to_bytes(hexstr=signature.s)
    if len(r) > 32 or len(s) > 32:
        raise InvalidSignatureError("Signature r and s must be at most 32 bytes")
    return r.rjust(32, b"\x00") + s.rjust(32, b"\x00") + bytes([signature.v])


def _require_signer_address(address: str | None) -> str:
    """Normalize an expected signer, rejecting values no key can produce."""
    if not address or not is_address(address):
        raise InvalidAddressError(f"Invalid address: {address!r}")
    if int(address, 16) == 0:
        raise InvalidAddressError("Invalid address: zero address")
    return to_checksum_address(address)


class TypedDataHandler:
    """EIP-712 domain, signing and verification for one verifying contract."""

    def __init__(self, config: TypedDataConfig):
        if not config:
            raise ValueError("Typed data config is required")
        self._config = config

    @property
    def config(self) -> TypedDataConfig:
        return self._config

    def get_domain_separator(self) -> str:
        """Compute the EIP-712 domain separator as a 0x hex string."""
        encoded = encode(
            ["bytes32", "bytes32", "bytes32", "uint256", "address"],
            [
                keccak(text=EIP712_DOMAIN),
                keccak(text=self._config.name),
                keccak(text=self._config.version),
                self._config.chain_id,
                self._config.address,
            ],
        )
        separator = keccak_hex(encoded)
        logger.debug("Domain separator for %s on chain %d: %s", self._config.address, self._config.chain_id, separator)
        return separator

    def get_domain_typed_data(self) -> DomainTypedData:
        """Domain as plain data, for embedding in request payloads."""
        return DomainTypedData(
            name=self._config.name,
            version=self._config.version,
            chain_id=self._config.chain_id,
            verifying_contract=self._config.address,
        )

    def sign_typed_data_request(
        self,
        params: dict[str, Any],
        request: EIP712Request,
        signer: TypedDataSigner,
    ) -> EIP712Response:
        """Sign `params` under the request's domain and types.

        Signer errors propagate unchanged. The returned response is the
        request plus the normalized signature.
        """
        raw_signature = signer.sign_typed_data(
            request.domain.model_dump(by_alias=True),
            request.type_definitions(),
            params,
        )
        signature = split_signature(raw_signature)
        logger.debug("Signed %s request for %s", request.primary_type, self._config.address)
        return EIP712Response(
            domain=request.domain,
            primary_type=request.primary_type,
            types=request.types,
            message=request.message,
            signature=signature,
        )

    def verify_typed_data_request_signature(self, expected_signer: str, response: EIP712Response) -> bool:
        """Check that `response` was signed by `expected_signer` in this domain.

        Raises InvalidAddressError for an empty or zero expected signer.
        Returns False on a signer mismatch or an unrecoverable signature.
        """
        expected = _require_signer_address(expected_signer)

        try:
            typed_data = response.to_typed_data(domain=self.get_domain_typed_data())
            signable = encode_typed_data(full_message=typed_data)
            recovered = Account.recover_message(signable, signature=join_signature(response.signature))
        except Exception as e:
            logger.debug("Rejecting %s signature: %s", response.primary_type, e)
            return False

        matches = to_checksum_address(recovered) == expected
        if not matches:
            logger.debug("Recovered signer %s does not match expected %s", recovered, expected)
        return matches
