"""CLI configuration management for EAS using pydantic-settings.

Handles web3 client setup, private key management, contract addresses and
the signing domains derived from them.
"""

from __future__ import annotations

from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_utils import is_address, to_checksum_address
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from web3 import Web3

from eas.sdk.delegated import DEFAULT_EAS_VERSION, Delegated
from eas.sdk.offchain import Offchain


class EASConfig(BaseSettings):
    """EAS CLI configuration using pydantic-settings BaseSettings."""

    model_config = SettingsConfigDict(
        env_prefix='EAS_',
        env_file='.env',
        env_file_encoding='utf-8',
        secrets_dir='/run/secrets'
    )

    rpc_url: str = Field(
        default="http://localhost:8545",
        description="Ethereum JSON-RPC endpoint"
    )
    chain_id: int = Field(
        default=1,
        description="Chain ID of the signing domain"
    )
    eas_address: str | None = Field(
        default=None,
        description="Deployed EAS contract address"
    )
    schema_registry_address: str | None = Field(
        default=None,
        description="Deployed SchemaRegistry contract address"
    )
    eas_version: str = Field(
        default=DEFAULT_EAS_VERSION,
        description="EAS contract version used in EIP-712 domains"
    )
    private_key: str | None = Field(
        default=None,
        description="Hex private key for signing"
    )

    @field_validator('chain_id')
    @classmethod
    def validate_chain_id(cls, v: int) -> int:
        """Validate chain ID is positive."""
        if v <= 0:
            raise ValueError("Chain ID must be positive")
        return v

    @field_validator('eas_address', 'schema_registry_address')
    @classmethod
    def validate_address(cls, v: str | None) -> str | None:
        """Validate and checksum contract addresses if provided."""
        if v is None:
            return v
        if not is_address(v):
            raise ValueError(f"Invalid contract address: {v}")
        return to_checksum_address(v)


def create_web3(config: EASConfig) -> Web3:
    """Create web3 client from configuration."""
    return Web3(Web3.HTTPProvider(config.rpc_url))


def create_account(config: EASConfig) -> LocalAccount:
    """Create local account from the configured private key."""
    if not config.private_key:
        raise ValueError("Private key required. Set EAS_PRIVATE_KEY environment variable.")

    try:
        return Account.from_key(config.private_key)
    except Exception as e:
        raise ValueError(f"Invalid private key: {e}")


def create_offchain(config: EASConfig) -> Offchain:
    """Off-chain attestation handler for the configured EAS deployment."""
    if not config.eas_address:
        raise ValueError("EAS address required. Set EAS_EAS_ADDRESS environment variable.")
    return Offchain(config.eas_address, config.chain_id, config.eas_version)


def create_delegated(config: EASConfig) -> Delegated:
    """Delegated request handler for the configured EAS deployment."""
    if not config.eas_address:
        raise ValueError("EAS address required. Set EAS_EAS_ADDRESS environment variable.")
    return Delegated(config.eas_address, config.chain_id, config.eas_version)


def validate_config(config: EASConfig) -> None:
    """Validate configuration completeness for schema registry operations."""
    if not config.schema_registry_address:
        raise ValueError("Schema registry address required. Set EAS_SCHEMA_REGISTRY_ADDRESS environment variable.")
    if not config.private_key:
        raise ValueError("Private key required. Set EAS_PRIVATE_KEY environment variable.")
