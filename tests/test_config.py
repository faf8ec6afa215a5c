"""
Tests for the ContractConfig data file loader and OrchestratorSettings.
"""
import json
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from portal_sdk.config import ContractConfig, OrchestratorSettings
from portal_sdk.exceptions import ConfigurationError, PortalError, UnsupportedNetworkError
from portal_sdk.registry import ContractRegistry

MOCK_CONTRACTS = {
    "mainnet": {
        "contracts": {
            "ethereum": {"Core": "0x98f3c9e6E3fAce36bAAd05FE09d375Ef1464288B"},
        },
        "rpc": {
            "terra": "https://lcd.example.com",
        },
    },
}


class TestContractConfig:
    """Test ContractConfig class."""

    def test_load_contracts_cached(self):
        """Contracts are cached after first load."""
        ContractConfig._contracts_cache = MOCK_CONTRACTS

        with patch("importlib.resources.files") as mock_files:
            result = ContractConfig.load_contracts()
            mock_files.assert_not_called()

        assert result == MOCK_CONTRACTS

    def test_bundled_data_loads(self):
        data = ContractConfig.load_contracts()
        assert set(data) == {"mainnet", "testnet", "devnet"}
        assert "contracts" in data["mainnet"]

    def test_override_file(self, tmp_path, monkeypatch):
        path = tmp_path / "contracts.json"
        path.write_text(json.dumps(MOCK_CONTRACTS))
        monkeypatch.setenv("PORTAL_CONTRACTS_FILE", str(path))

        assert ContractConfig.load_contracts() == MOCK_CONTRACTS
        registry = ContractRegistry.from_config()
        assert len(registry) == 1

    def test_override_file_missing(self, tmp_path, monkeypatch):
        monkeypatch.setenv("PORTAL_CONTRACTS_FILE", str(tmp_path / "missing.json"))

        with pytest.raises(ConfigurationError, match="Cannot read contract data") as exc_info:
            ContractConfig.load_contracts()

        assert isinstance(exc_info.value, PortalError)
        assert isinstance(exc_info.value.__cause__, OSError)
        assert ContractConfig._contracts_cache is None

    def test_override_file_invalid_json(self, tmp_path, monkeypatch):
        path = tmp_path / "contracts.json"
        path.write_text("{\"mainnet\": ")
        monkeypatch.setenv("PORTAL_CONTRACTS_FILE", str(path))

        with pytest.raises(ConfigurationError, match="Invalid JSON"):
            ContractConfig.load_contracts()

    def test_override_file_not_an_object(self, tmp_path, monkeypatch):
        path = tmp_path / "contracts.json"
        path.write_text("[]")
        monkeypatch.setenv("PORTAL_CONTRACTS_FILE", str(path))

        with pytest.raises(ConfigurationError, match="JSON object"):
            ContractConfig.load_contracts()

    def test_get_network_not_found(self):
        ContractConfig._contracts_cache = MOCK_CONTRACTS

        with pytest.raises(UnsupportedNetworkError) as exc_info:
            ContractConfig.get_network("testnet")

        assert "mainnet" in str(exc_info.value)

    def test_get_network_unknown_name(self):
        with pytest.raises(UnsupportedNetworkError):
            ContractConfig.get_network("localnet")

    def test_get_rpc_url_from_file(self):
        ContractConfig._contracts_cache = MOCK_CONTRACTS
        assert ContractConfig.get_rpc_url("mainnet", "terra") == "https://lcd.example.com"
        assert ContractConfig.get_rpc_url("mainnet", "solana") is None

    def test_get_rpc_url_env_override(self, monkeypatch):
        ContractConfig._contracts_cache = MOCK_CONTRACTS
        monkeypatch.setenv("PORTAL_TERRA_MAINNET_RPC_URL", "https://env.example.com")
        assert ContractConfig.get_rpc_url("mainnet", "terra") == "https://env.example.com"

    def test_get_rpc_url_argument_wins(self, monkeypatch):
        monkeypatch.setenv("PORTAL_TERRA_MAINNET_RPC_URL", "https://env.example.com")
        assert ContractConfig.get_rpc_url("mainnet", "terra", override="https://arg.example.com") == \
            "https://arg.example.com"


class TestOrchestratorSettings:
    """Test polling settings."""

    def test_defaults(self):
        settings = OrchestratorSettings()
        assert settings.poll_interval == 1.0
        assert settings.max_polls == 120
        assert settings.confirmation_timeout == 120.0

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("PORTAL_POLL_INTERVAL", "2.5")
        monkeypatch.setenv("PORTAL_MAX_POLLS", "7")
        monkeypatch.setenv("PORTAL_CONFIRM_TIMEOUT", "30")

        settings = OrchestratorSettings.from_env()
        assert settings.poll_interval == 2.5
        assert settings.max_polls == 7
        assert settings.confirmation_timeout == 30.0
        assert settings.backoff_factor == 1.0

    def test_from_env_invalid(self, monkeypatch):
        monkeypatch.setenv("PORTAL_MAX_POLLS", "0")
        with pytest.raises(ValidationError):
            OrchestratorSettings.from_env()

    def test_fixed_delay(self):
        settings = OrchestratorSettings(poll_interval=1.0)
        assert [settings.delay_for(n) for n in range(1, 4)] == [1.0, 1.0, 1.0]

    def test_backoff_is_capped(self):
        settings = OrchestratorSettings(poll_interval=1.0, backoff_factor=2.0, max_poll_interval=5.0)
        assert [settings.delay_for(n) for n in range(1, 6)] == [1.0, 2.0, 4.0, 5.0, 5.0]
