"""Typer CLI for the Ethereum Attestation Service SDK.

Provides commands: schema-uid, attestation-uid, domain-separator,
sign-offchain, verify-offchain, register-schema, get-schema, get-attestation.
Main entrypoint for the EAS command-line interface.
"""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any

import typer
from rich.console import Console

from eas import __version__
from eas.cli.config import (
    EASConfig,
    create_account,
    create_delegated,
    create_offchain,
    create_web3,
    validate_config,
)
from eas.sdk.eas import EASClient, SchemaRegistryClient
from eas.sdk.hashing import ZERO_ADDRESS, ZERO_BYTES32, get_schema_uid, get_uid
from eas.sdk.models import SignedOffchainAttestation
from eas.sdk.typed_data import LocalTypedDataSigner


app = typer.Typer(
    name="eas",
    help="Ethereum Attestation Service - UIDs, EIP-712 signing and registry access",
    add_completion=False,
    rich_markup_mode="rich"
)
console = Console()

OFFCHAIN_FIELDS = ("schema", "recipient")


def version_callback(show_version: bool) -> None:
    """Show version and exit."""
    if show_version:
        console.print(f"EAS SDK version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging")
) -> None:
    """Ethereum Attestation Service CLI."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)


@app.command()
def schema_uid(
    schema: str = typer.Argument(..., help="Schema string, e.g. 'bool like'"),
    resolver: str = typer.Option(ZERO_ADDRESS, "--resolver", "-r", help="Resolver address"),
    revocable: bool = typer.Option(True, "--revocable/--irrevocable", help="Whether attestations are revocable")
) -> None:
    """Compute the UID the registry assigns to a schema."""
    try:
        console.print(get_schema_uid(schema, resolver, revocable))
    except Exception as e:
        console.print(f"❌ Error computing schema UID: {e}")
        raise typer.Exit(1)


@app.command()
def attestation_uid(
    schema: str = typer.Argument(..., help="Schema string"),
    recipient: str = typer.Argument(..., help="Recipient address"),
    attester: str = typer.Argument(..., help="Attester address"),
    attested_at: int = typer.Option(..., "--time", "-t", help="Attestation time (unix seconds)"),
    expiration_time: int = typer.Option(0, "--expiration", "-e", help="Expiration time, 0 for none"),
    revocable: bool = typer.Option(True, "--revocable/--irrevocable"),
    ref_uid: str = typer.Option(ZERO_BYTES32, "--ref-uid", help="Referenced attestation UID"),
    data: str = typer.Option("0x", "--data", "-d", help="Payload as 0x hex"),
    bump: int = typer.Option(0, "--bump", "-b", help="Bump counter")
) -> None:
    """Compute an attestation UID."""
    try:
        uid = get_uid(schema, recipient, attester, attested_at, expiration_time, revocable, ref_uid, data, bump)
        console.print(uid)
    except Exception as e:
        console.print(f"❌ Error computing attestation UID: {e}")
        raise typer.Exit(1)


@app.command()
def domain_separator(
    offchain: bool = typer.Option(False, "--offchain", help="Use the off-chain attestation domain")
) -> None:
    """Print the EIP-712 domain separator of the configured EAS contract."""
    try:
        config = EASConfig()
        handler = create_offchain(config) if offchain else create_delegated(config)
        domain = handler.get_domain_typed_data()

        console.print(f"Domain: [bold]{domain.name}[/bold] v{domain.version} on chain {domain.chain_id}")
        console.print(f"Verifying contract: {domain.verifying_contract}")
        console.print(f"Separator: [bold]{handler.get_domain_separator()}[/bold]")

    except Exception as e:
        console.print(f"❌ Error computing domain separator: {e}")
        raise typer.Exit(1)


@app.command()
def sign_offchain(
    attestation_file: Path = typer.Argument(..., help="Path to JSON attestation fields"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write signed attestation here")
) -> None:
    """Sign an off-chain attestation with the configured private key."""
    try:
        config = EASConfig()
        params = _load_offchain_params(attestation_file)

        handler = create_offchain(config)
        signer = LocalTypedDataSigner(create_account(config))
        signed = handler.sign_offchain_attestation(params, signer)

        payload = signed.model_dump_json(by_alias=True, indent=2)
        if output:
            output.write_text(payload)
        else:
            console.print_json(payload)

        console.print("✅ Attestation signed successfully!")
        console.print(f"UID: [bold]{signed.uid}[/bold]")
        console.print(f"Attester: {signer.address}")

    except Exception as e:
        console.print(f"❌ Error signing attestation: {e}")
        raise typer.Exit(1)


def _load_offchain_params(attestation_file: Path) -> dict[str, Any]:
    """Load off-chain attestation fields, filling optional ones with defaults."""
    data = _load_json_file(attestation_file, "Attestation")
    missing = [name for name in OFFCHAIN_FIELDS if name not in data]
    if missing:
        raise ValueError(f"Attestation file missing fields: {', '.join(missing)}")

    return {
        "schema": data["schema"],
        "recipient": data["recipient"],
        "time": int(data.get("time") or time.time()),
        "expirationTime": int(data.get("expirationTime", 0)),
        "revocable": _parse_bool(data.get("revocable", True), "revocable"),
        "refUID": data.get("refUID", ZERO_BYTES32),
        "data": data.get("data", "0x"),
    }


def _parse_bool(value: Any, name: str) -> bool:
    """Accept JSON booleans or the strings "true"/"false"."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise ValueError(f"{name} must be a boolean, got {value!r}")


def _load_json_file(path: Path, label: str) -> dict[str, Any]:
    """Load and validate a JSON object file."""
    if not path.exists():
        raise ValueError(f"{label} file not found: {path}")

    try:
        with path.open() as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"{label} must be a JSON object")
        return data
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {label.lower()} file: {e}")


@app.command()
def verify_offchain(
    signed_file: Path = typer.Argument(..., help="Path to signed attestation JSON"),
    attester: str = typer.Argument(..., help="Expected attester address")
) -> None:
    """Verify a signed off-chain attestation against the configured domain."""
    try:
        config = EASConfig()
        signed = SignedOffchainAttestation.model_validate(_load_json_file(signed_file, "Signed attestation"))
        handler = create_offchain(config)
        valid = handler.verify_offchain_attestation_signature(attester, signed)
    except Exception as e:
        console.print(f"❌ Error verifying attestation: {e}")
        raise typer.Exit(1)

    if not valid:
        console.print("❌ Signature does not match attester")
        raise typer.Exit(1)

    console.print("✅ Signature valid!")
    console.print(f"UID: [bold]{signed.uid}[/bold]")
    console.print(f"Attester: {attester}")


@app.command()
def register_schema(
    schema: str = typer.Argument(..., help="Schema string, e.g. 'bool like'"),
    resolver: str = typer.Option(ZERO_ADDRESS, "--resolver", "-r", help="Resolver address"),
    revocable: bool = typer.Option(True, "--revocable/--irrevocable")
) -> None:
    """Register a schema in the SchemaRegistry."""
    try:
        config = EASConfig()
        validate_config(config)

        client = SchemaRegistryClient(create_web3(config), config.schema_registry_address)
        client.set_account(create_account(config))
        uid = client.register(schema, resolver, revocable)

        console.print("✅ Schema registered successfully!")
        console.print(f"Schema UID: [bold]{uid}[/bold]")

    except Exception as e:
        console.print(f"❌ Error registering schema: {e}")
        raise typer.Exit(1)


@app.command()
def get_schema(
    uid: str = typer.Argument(..., help="Schema UID to query")
) -> None:
    """Get schema information by UID."""
    try:
        config = EASConfig()
        if not config.schema_registry_address:
            raise ValueError("Schema registry address required. Set EAS_SCHEMA_REGISTRY_ADDRESS environment variable.")

        client = SchemaRegistryClient(create_web3(config), config.schema_registry_address)
        record = client.get_schema(uid)

        console.print("✅ Schema found!")
        console.print(f"UID: [bold]{record.uid}[/bold]")
        console.print(f"Schema: {record.schema_}")
        console.print(f"Resolver: {record.resolver}")
        console.print(f"Revocable: {record.revocable}")

    except Exception as e:
        console.print(f"❌ Error retrieving schema: {e}")
        raise typer.Exit(1)


@app.command()
def get_attestation(
    uid: str = typer.Argument(..., help="Attestation UID to query")
) -> None:
    """Get attestation information by UID."""
    try:
        config = EASConfig()
        if not config.eas_address:
            raise ValueError("EAS address required. Set EAS_EAS_ADDRESS environment variable.")

        client = EASClient(create_web3(config), config.eas_address)
        attestation = client.get_attestation(uid)

        console.print("✅ Attestation found!")
        console.print(f"UID: [bold]{attestation.uid}[/bold]")
        console.print(f"Schema UID: {attestation.schema_uid}")
        console.print(f"Attester: {attestation.attester}")
        console.print(f"Recipient: {attestation.recipient}")
        console.print(f"Revoked: {attestation.revoked}")

    except Exception as e:
        console.print(f"❌ Error retrieving attestation: {e}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
