"""Test CLI commands and configuration.

Unit tests for the EAS CLI covering argument parsing, validation and
configuration management. Network access is mocked.
"""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from pydantic import ValidationError
from typer.testing import CliRunner

from eas.cli.config import EASConfig, create_account, create_delegated, create_offchain, create_web3, validate_config
from eas.cli.main import _load_json_file, _load_offchain_params, app
from eas.sdk.errors import SchemaNotFoundError
from eas.sdk.hashing import ZERO_ADDRESS, get_schema_uid
from eas.sdk.models import SchemaRecord
from tests.helpers import CHAIN_ID, EAS_ADDRESS, REGISTRY_ADDRESS, SCHEMA_UID, SIGNER_KEY, offchain_params, other_account, signer_account


@pytest.fixture
def runner() -> CliRunner:
    """CLI test runner fixture."""
    return CliRunner()


@pytest.fixture
def mock_config() -> EASConfig:
    """Configuration with valid test data."""
    return EASConfig(
        rpc_url="http://localhost:8545",
        chain_id=CHAIN_ID,
        eas_address=EAS_ADDRESS,
        schema_registry_address=REGISTRY_ADDRESS,
        private_key=SIGNER_KEY,
    )


def test_config_load_from_env():
    """Test configuration loading from environment variables."""
    with patch.dict('os.environ', {
        'EAS_RPC_URL': 'http://sepolia:8545',
        'EAS_CHAIN_ID': '11155111',
        'EAS_EAS_ADDRESS': EAS_ADDRESS.lower(),
        'EAS_PRIVATE_KEY': SIGNER_KEY,
    }):
        config = EASConfig()
        assert config.rpc_url == 'http://sepolia:8545'
        assert config.chain_id == 11155111
        assert config.eas_address == EAS_ADDRESS
        assert config.private_key == SIGNER_KEY


def test_config_rejects_invalid_values():
    """Test configuration field validation."""
    with pytest.raises(ValidationError, match="Chain ID must be positive"):
        EASConfig(chain_id=0)
    with pytest.raises(ValidationError, match="Invalid contract address"):
        EASConfig(eas_address="0x1234")


def test_config_validation_success(mock_config: EASConfig):
    """Test successful configuration validation."""
    validate_config(mock_config)  # Should not raise


def test_config_validation_missing_registry():
    """Test configuration validation with missing registry address."""
    config = EASConfig(private_key=SIGNER_KEY)
    with pytest.raises(ValueError, match="Schema registry address required"):
        validate_config(config)


def test_config_validation_missing_private_key():
    """Test configuration validation with missing private key."""
    config = EASConfig(schema_registry_address=REGISTRY_ADDRESS)
    with pytest.raises(ValueError, match="Private key required"):
        validate_config(config)


def test_create_web3(mock_config: EASConfig):
    """Test web3 client creation."""
    assert create_web3(mock_config) is not None


def test_create_account(mock_config: EASConfig):
    """Test account creation from the configured key."""
    assert create_account(mock_config).address == signer_account().address

    with pytest.raises(ValueError, match="Invalid private key"):
        create_account(EASConfig(private_key="0x1234"))


def test_create_handlers(mock_config: EASConfig):
    """Test handlers are bound to the configured domain."""
    offchain = create_offchain(mock_config)
    delegated = create_delegated(mock_config)

    assert offchain.config.address == EAS_ADDRESS
    assert delegated.config.chain_id == CHAIN_ID
    assert offchain.get_domain_separator() != delegated.get_domain_separator()

    with pytest.raises(ValueError, match="EAS address required"):
        create_offchain(EASConfig())


def test_load_json_file_not_found():
    """Test JSON loading with non-existent file."""
    with pytest.raises(ValueError, match="Attestation file not found"):
        _load_json_file(Path("nonexistent.json"), "Attestation")


def test_load_json_file_invalid_json(tmp_path: Path):
    """Test JSON loading with invalid content."""
    bad_file = tmp_path / "invalid.json"
    bad_file.write_text("invalid json {")

    with pytest.raises(ValueError, match="Invalid JSON"):
        _load_json_file(bad_file, "Attestation")


def test_load_offchain_params_defaults(tmp_path: Path):
    """Test optional attestation fields are filled in."""
    attestation_file = tmp_path / "attestation.json"
    attestation_file.write_text(json.dumps({"schema": SCHEMA_UID, "recipient": ZERO_ADDRESS, "time": 10}))

    params = _load_offchain_params(attestation_file)

    assert params["time"] == 10
    assert params["expirationTime"] == 0
    assert params["revocable"] is True
    assert params["data"] == "0x"


@pytest.mark.parametrize("value, expected", [(False, False), ("false", False), ("True", True), (True, True)])
def test_load_offchain_params_revocable(tmp_path: Path, value, expected):
    """Test revocable accepts JSON booleans and true/false strings."""
    attestation_file = tmp_path / "attestation.json"
    attestation_file.write_text(json.dumps({"schema": SCHEMA_UID, "recipient": ZERO_ADDRESS, "revocable": value}))

    assert _load_offchain_params(attestation_file)["revocable"] is expected


@pytest.mark.parametrize("value", ["maybe", 0, None])
def test_load_offchain_params_invalid_revocable(tmp_path: Path, value):
    """Test non-boolean revocable values are rejected."""
    attestation_file = tmp_path / "attestation.json"
    attestation_file.write_text(json.dumps({"schema": SCHEMA_UID, "recipient": ZERO_ADDRESS, "revocable": value}))

    with pytest.raises(ValueError, match="revocable must be a boolean"):
        _load_offchain_params(attestation_file)


def test_load_offchain_params_missing_fields(tmp_path: Path):
    """Test required attestation fields are enforced."""
    attestation_file = tmp_path / "attestation.json"
    attestation_file.write_text(json.dumps({"schema": SCHEMA_UID}))

    with pytest.raises(ValueError, match="missing fields: recipient"):
        _load_offchain_params(attestation_file)


def test_cli_version_display(runner: CliRunner):
    """Test CLI version display."""
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert "EAS SDK version" in result.stdout


def test_schema_uid_command(runner: CliRunner):
    """Test schema-uid prints the derived UID."""
    result = runner.invoke(app, ["schema-uid", "bool like", "--irrevocable"])

    assert result.exit_code == 0
    assert get_schema_uid("bool like", ZERO_ADDRESS, False) in result.stdout


def test_attestation_uid_command_invalid_address(runner: CliRunner):
    """Test attestation-uid reports bad input."""
    result = runner.invoke(app, ["attestation-uid", "bool like", "0x1234", ZERO_ADDRESS, "--time", "1"])

    assert result.exit_code == 1
    assert "Error computing attestation UID" in result.stdout


@patch('eas.cli.main.EASConfig')
def test_sign_and_verify_offchain_commands(mock_config_class: MagicMock, mock_config: EASConfig, runner: CliRunner, tmp_path: Path):
    """Test sign-offchain output verifies with verify-offchain."""
    mock_config_class.return_value = mock_config
    attestation_file = tmp_path / "attestation.json"
    attestation_file.write_text(json.dumps(offchain_params()))
    signed_file = tmp_path / "signed.json"

    result = runner.invoke(app, ["sign-offchain", str(attestation_file), "--output", str(signed_file)])
    assert result.exit_code == 0
    assert "Attestation signed successfully" in result.stdout
    assert json.loads(signed_file.read_text())["primaryType"] == "Attestation"

    result = runner.invoke(app, ["verify-offchain", str(signed_file), signer_account().address])
    assert result.exit_code == 0
    assert "Signature valid" in result.stdout

    result = runner.invoke(app, ["verify-offchain", str(signed_file), other_account().address])
    assert result.exit_code == 1
    assert "does not match" in result.stdout


@patch('eas.cli.main.EASConfig')
def test_verify_offchain_zero_attester(mock_config_class: MagicMock, mock_config: EASConfig, runner: CliRunner, tmp_path: Path):
    """Test verify-offchain surfaces the zero-address error."""
    mock_config_class.return_value = mock_config
    attestation_file = tmp_path / "attestation.json"
    attestation_file.write_text(json.dumps(offchain_params()))
    signed_file = tmp_path / "signed.json"
    runner.invoke(app, ["sign-offchain", str(attestation_file), "--output", str(signed_file)])

    result = runner.invoke(app, ["verify-offchain", str(signed_file), ZERO_ADDRESS])

    assert result.exit_code == 1
    assert "Invalid address" in result.stdout


@patch('eas.cli.main.EASConfig')
def test_domain_separator_command(mock_config_class: MagicMock, mock_config: EASConfig, runner: CliRunner):
    """Test domain-separator prints the delegated domain by default."""
    mock_config_class.return_value = mock_config

    result = runner.invoke(app, ["domain-separator"])

    assert result.exit_code == 0
    assert create_delegated(mock_config).get_domain_separator() in result.stdout

    result = runner.invoke(app, ["domain-separator", "--offchain"])
    assert result.exit_code == 0
    assert "EAS Attestation" in result.stdout


@patch('eas.cli.main.EASConfig')
@patch('eas.cli.main.create_web3')
@patch('eas.cli.main.SchemaRegistryClient')
def test_register_schema_command_success(
    mock_registry_client: MagicMock,
    mock_create_web3: MagicMock,
    mock_config_class: MagicMock,
    mock_config: EASConfig,
    runner: CliRunner
):
    """Test successful register-schema command execution."""
    mock_config_class.return_value = mock_config
    mock_client = MagicMock()
    mock_client.register.return_value = SCHEMA_UID
    mock_registry_client.return_value = mock_client

    result = runner.invoke(app, ["register-schema", "bool like"])

    assert result.exit_code == 0
    assert "Schema registered successfully" in result.stdout
    assert SCHEMA_UID in result.stdout
    mock_client.register.assert_called_once_with("bool like", ZERO_ADDRESS, True)


@patch('eas.cli.main.EASConfig')
def test_register_schema_command_missing_config(mock_config_class: MagicMock, runner: CliRunner):
    """Test register-schema command with missing configuration."""
    mock_config_class.return_value = EASConfig()

    result = runner.invoke(app, ["register-schema", "bool like"])

    assert result.exit_code == 1
    assert "Schema registry address required" in result.stdout


@patch('eas.cli.main.EASConfig')
@patch('eas.cli.main.create_web3')
@patch('eas.cli.main.SchemaRegistryClient')
def test_get_schema_command(
    mock_registry_client: MagicMock,
    mock_create_web3: MagicMock,
    mock_config_class: MagicMock,
    mock_config: EASConfig,
    runner: CliRunner
):
    """Test get-schema prints the record, or fails when it is missing."""
    mock_config_class.return_value = mock_config
    mock_client = MagicMock()
    mock_client.get_schema.return_value = SchemaRecord(uid=SCHEMA_UID, resolver=ZERO_ADDRESS, revocable=True, schema="bool like")
    mock_registry_client.return_value = mock_client

    result = runner.invoke(app, ["get-schema", SCHEMA_UID])
    assert result.exit_code == 0
    assert "bool like" in result.stdout

    mock_client.get_schema.side_effect = SchemaNotFoundError(SCHEMA_UID)
    result = runner.invoke(app, ["get-schema", SCHEMA_UID])
    assert result.exit_code == 1
    assert "Schema not found" in result.stdout
