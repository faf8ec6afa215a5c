"""
Configuration for the Portal bridge SDK.

Contract addresses and RPC endpoints ship as package data
(``portal_sdk/data/contracts.json``); polling parameters for the
orchestrator come from the environment.
"""
import json
import logging
import os
import pathlib
import importlib.resources
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, Field

from .chains import ChainId, Network, as_chain, as_network
from .exceptions import ConfigurationError, UnsupportedNetworkError

logger = logging.getLogger(__name__)


class ContractConfig:
    """Access to the static contract registry data file."""

    _contracts_cache: Optional[Dict[str, Any]] = None

    @classmethod
    def load_contracts(cls) -> Dict[str, Any]:
        """
        Load contract data, caching it after the first read.

        ``PORTAL_CONTRACTS_FILE`` may point at a replacement JSON file with
        the same layout as the bundled one.

        Returns:
            Mapping of network name to ``{"contracts": ..., "rpc": ...}``

        Raises:
            ConfigurationError: If the file cannot be read or is not a JSON object
        """
        if cls._contracts_cache is not None:
            return cls._contracts_cache

        override_path = os.environ.get("PORTAL_CONTRACTS_FILE")
        if override_path:
            logger.info(f"Loading contract registry from {override_path}")
            source = pathlib.Path(override_path)
        else:
            source = importlib.resources.files("portal_sdk") / "data" / "contracts.json"

        try:
            with source.open("r") as f:
                data = json.load(f)
        except OSError as e:
            raise ConfigurationError(f"Cannot read contract data from {source}: {e}") from e
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in contract data {source}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError(f"Contract data in {source} must be a JSON object keyed by network")

        cls._contracts_cache = data
        return data

    @classmethod
    def reset_cache(cls) -> None:
        cls._contracts_cache = None

    @classmethod
    def get_network(cls, network: Union[Network, str]) -> Dict[str, Any]:
        """
        Get the configuration block for a network.

        Raises:
            UnsupportedNetworkError: If the network has no configuration
        """
        data = cls.load_contracts()
        name = as_network(network).value
        if name not in data:
            available = ", ".join(sorted(data.keys()))
            raise UnsupportedNetworkError(f"Network '{name}' not configured. Available networks: {available}")
        return data[name]

    @classmethod
    def get_contracts(cls, network: Union[Network, str]) -> Dict[str, Dict[str, Optional[str]]]:
        return cls.get_network(network).get("contracts", {})

    @classmethod
    def get_rpc_url(
        cls,
        network: Union[Network, str],
        chain: Union[ChainId, str],
        override: Optional[str] = None
    ) -> Optional[str]:
        """
        Get the RPC (or LCD) endpoint for a chain on a network.

        Precedence is ``override``, then ``PORTAL_<CHAIN>_<NETWORK>_RPC_URL``,
        then the ``rpc`` section of the data file.

        Returns:
            Endpoint URL, or None when nothing is configured
        """
        if override:
            return override

        network = as_network(network)
        chain = as_chain(chain)
        env_var = f"PORTAL_{chain.value.upper()}_{network.value.upper()}_RPC_URL"
        env_url = os.environ.get(env_var)
        if env_url:
            return env_url

        return cls.get_network(network).get("rpc", {}).get(chain.value)


class OrchestratorSettings(BaseModel):
    """Confirmation polling parameters"""
    poll_interval: float = Field(1.0, ge=0)
    backoff_factor: float = Field(1.0, ge=1.0)
    max_poll_interval: float = Field(10.0, ge=0)
    max_polls: int = Field(120, ge=1)
    confirmation_timeout: float = Field(120.0, gt=0)

    @classmethod
    def from_env(cls) -> "OrchestratorSettings":
        """
        Build settings from ``PORTAL_*`` environment variables.

        Unset variables keep their defaults.
        """
        env_map = {
            "poll_interval": "PORTAL_POLL_INTERVAL",
            "backoff_factor": "PORTAL_POLL_BACKOFF",
            "max_poll_interval": "PORTAL_MAX_POLL_INTERVAL",
            "max_polls": "PORTAL_MAX_POLLS",
            "confirmation_timeout": "PORTAL_CONFIRM_TIMEOUT",
        }
        values = {
            field_name: os.environ[env_var]
            for field_name, env_var in env_map.items()
            if os.environ.get(env_var)
        }
        return cls(**values)

    def delay_for(self, poll_number: int) -> float:
        """Delay before poll ``poll_number + 1`` (1-based count of polls made)."""
        delay = self.poll_interval * (self.backoff_factor ** max(poll_number - 1, 0))
        return min(delay, self.max_poll_interval)
