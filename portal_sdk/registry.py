"""
Contract registry resolver.

Maps ``(network, chain, module)`` to the native address of a deployed
contract. The registry is an immutable snapshot built once from
``ContractConfig`` and safe to share between threads.
"""
import logging
import threading
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from .chains import ChainId, Module, Network, as_chain, as_module, as_network
from .config import ContractConfig
from .exceptions import ModuleNotDeployedError

logger = logging.getLogger(__name__)

RegistryKey = Tuple[Network, ChainId, Module]


class ContractRegistry:
    """Read-only lookup table of deployed contract addresses."""

    def __init__(self, entries: Mapping[RegistryKey, str]):
        self._entries: Mapping[RegistryKey, str] = MappingProxyType(dict(entries))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ContractRegistry":
        """
        Build a registry from nested ``{network: {chain: {module: address}}}`` data.

        Networks may also use the data file layout ``{network: {"contracts": {...}}}``.
        Empty or null addresses are treated as not deployed. Unknown chain
        names raise ``UnsupportedChainError``.
        """
        entries: Dict[RegistryKey, str] = {}
        for network_name, block in data.items():
            network = as_network(network_name)
            chains = block.get("contracts", block) if isinstance(block, Mapping) else {}
            for chain_name, modules in chains.items():
                chain = as_chain(chain_name)
                for module_name, address in (modules or {}).items():
                    module = as_module(module_name)
                    if address:
                        entries[(network, chain, module)] = str(address)
        return cls(entries)

    @classmethod
    def from_config(cls) -> "ContractRegistry":
        return cls.from_mapping(ContractConfig.load_contracts())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: RegistryKey) -> bool:
        return key in self._entries

    def resolve(
        self,
        network: Union[Network, str],
        chain: Union[ChainId, str],
        module: Union[Module, str]
    ) -> str:
        """
        Resolve a contract's native address.

        Args:
            network: mainnet, testnet or devnet
            chain: Chain name or ChainId
            module: Core, TokenBridge or NFTBridge

        Returns:
            Native address string, never empty

        Raises:
            UnsupportedChainError: If the chain is not recognized
            ModuleNotDeployedError: If no contract is registered for the triple
        """
        chain = as_chain(chain)
        network = as_network(network)
        module = as_module(module)

        address = self._entries.get((network, chain, module))
        if not address:
            raise ModuleNotDeployedError(module.value, chain.value, network.value)
        return address

    def modules(self, network: Union[Network, str], chain: Union[ChainId, str]) -> List[Module]:
        """List modules deployed on a chain, in Module declaration order."""
        network = as_network(network)
        chain = as_chain(chain)
        return [m for m in Module if (network, chain, m) in self._entries]

    def chains(self, network: Union[Network, str]) -> List[ChainId]:
        """List chains with at least one deployed module on a network."""
        network = as_network(network)
        present = {key[1] for key in self._entries if key[0] == network}
        return [c for c in ChainId if c in present]


_default_registry: Optional[ContractRegistry] = None
_default_registry_lock = threading.Lock()


def get_default_registry() -> ContractRegistry:
    """Get the process-wide registry, loading it from the bundled data on first use."""
    global _default_registry
    with _default_registry_lock:
        if _default_registry is None:
            _default_registry = ContractRegistry.from_config()
            logger.debug(f"Loaded contract registry with {len(_default_registry)} entries")
        return _default_registry


def resolve(
    network: Union[Network, str],
    chain: Union[ChainId, str],
    module: Union[Module, str],
    registry: Optional[ContractRegistry] = None
) -> str:
    """Resolve a contract address against ``registry`` or the default registry."""
    if registry is None:
        registry = get_default_registry()
    return registry.resolve(network, chain, module)
