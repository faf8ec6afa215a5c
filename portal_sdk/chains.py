"""
Static chain, network and module definitions.

The chain table is configuration-as-code: one immutable ``ChainInfo`` row per
supported chain describing how its native addresses are encoded, which fee
denominations it accepts and where its transactions can be inspected.
"""
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple, Union

from .exceptions import UnsupportedChainError, UnsupportedNetworkError, UnsupportedModuleError


class Network(str, Enum):
    """Deployment environment a request targets."""
    MAINNET = "mainnet"
    TESTNET = "testnet"
    DEVNET = "devnet"


class Module(str, Enum):
    """Logical contract deployment category."""
    CORE = "Core"
    TOKEN_BRIDGE = "TokenBridge"
    NFT_BRIDGE = "NFTBridge"


class ChainId(str, Enum):
    """Supported chains, valued by their command line names."""
    SOLANA = "solana"
    ETHEREUM = "ethereum"
    TERRA = "terra"
    BSC = "bsc"
    POLYGON = "polygon"
    AVALANCHE = "avalanche"
    OASIS = "oasis"
    ALGORAND = "algorand"
    AURORA = "aurora"
    FANTOM = "fantom"
    KARURA = "karura"
    ACALA = "acala"
    KLAYTN = "klaytn"
    CELO = "celo"
    NEAR = "near"
    MOONBEAM = "moonbeam"
    TERRA2 = "terra2"
    INJECTIVE = "injective"
    XPLA = "xpla"
    APTOS = "aptos"
    SUI = "sui"
    ARBITRUM = "arbitrum"
    OPTIMISM = "optimism"


class AddressFamily(str, Enum):
    """How a chain encodes native contract/account addresses."""
    ACCOUNT_BASE58 = "account_base58"
    ACCOUNT_HEX = "account_hex"
    COSMOS = "cosmos"
    EVM = "evm"
    ALGORAND = "algorand"
    NEAR = "near"


@dataclass(frozen=True)
class ChainInfo:
    """
    Static properties of a chain.

    Attributes:
        chain: The chain this row describes
        wormhole_id: Numeric chain id used in cross-chain messages
        family: Native address family, selects the address codec
        native_length: Length in bytes of a raw native address
        encoding: Human readable name of the native encoding
        bech32_prefix: Human readable part of bech32 addresses (cosmos only)
        fee_denoms: Supported fee denominations in priority order, empty when fixed
        withdraw_denoms: Native tokens the token bridge can withdraw (cosmos only)
        evm_chain_ids: EVM chain id per network (evm only)
        explorers: Transaction URL template per network, ``{}`` is the handle
    """
    chain: ChainId
    wormhole_id: int
    family: AddressFamily
    native_length: int
    encoding: str
    bech32_prefix: Optional[str] = None
    fee_denoms: Tuple[str, ...] = ()
    withdraw_denoms: Tuple[str, ...] = ()
    evm_chain_ids: Mapping[Network, int] = field(default_factory=dict)
    explorers: Mapping[Network, str] = field(default_factory=dict)

    @property
    def has_variable_fees(self) -> bool:
        return len(self.fee_denoms) > 0


def _evm(chain: ChainId, wormhole_id: int, chain_ids: Dict[Network, int],
         explorers: Optional[Dict[Network, str]] = None) -> ChainInfo:
    return ChainInfo(
        chain=chain,
        wormhole_id=wormhole_id,
        family=AddressFamily.EVM,
        native_length=20,
        encoding="hex",
        evm_chain_ids=MappingProxyType(chain_ids),
        explorers=MappingProxyType(explorers or {}),
    )


def _cosmos(chain: ChainId, wormhole_id: int, prefix: str, fee_denoms: Tuple[str, ...],
            withdraw_denoms: Tuple[str, ...] = (),
            explorers: Optional[Dict[Network, str]] = None) -> ChainInfo:
    return ChainInfo(
        chain=chain,
        wormhole_id=wormhole_id,
        family=AddressFamily.COSMOS,
        native_length=20,
        encoding="bech32",
        bech32_prefix=prefix,
        fee_denoms=fee_denoms,
        withdraw_denoms=withdraw_denoms,
        explorers=MappingProxyType(explorers or {}),
    )


_CHAIN_TABLE: Dict[ChainId, ChainInfo] = {
    ChainId.SOLANA: ChainInfo(
        chain=ChainId.SOLANA,
        wormhole_id=1,
        family=AddressFamily.ACCOUNT_BASE58,
        native_length=32,
        encoding="base58",
        explorers=MappingProxyType({
            Network.MAINNET: "https://explorer.solana.com/tx/{}",
            Network.TESTNET: "https://explorer.solana.com/tx/{}?cluster=devnet",
        }),
    ),
    ChainId.ETHEREUM: _evm(ChainId.ETHEREUM, 2, {
        Network.MAINNET: 1, Network.TESTNET: 5, Network.DEVNET: 1337,
    }, {
        Network.MAINNET: "https://etherscan.io/tx/{}",
        Network.TESTNET: "https://goerli.etherscan.io/tx/{}",
    }),
    ChainId.TERRA: _cosmos(
        ChainId.TERRA, 3, "terra", ("uluna", "uusd"), ("uluna", "uusd"),
        {
            Network.MAINNET: "https://finder.terra.money/classic/tx/{}",
            Network.TESTNET: "https://finder.terra.money/testnet/tx/{}",
        },
    ),
    ChainId.BSC: _evm(ChainId.BSC, 4, {
        Network.MAINNET: 56, Network.TESTNET: 97, Network.DEVNET: 1397,
    }, {
        Network.MAINNET: "https://bscscan.com/tx/{}",
        Network.TESTNET: "https://testnet.bscscan.com/tx/{}",
    }),
    ChainId.POLYGON: _evm(ChainId.POLYGON, 5, {
        Network.MAINNET: 137, Network.TESTNET: 80001,
    }, {
        Network.MAINNET: "https://polygonscan.com/tx/{}",
        Network.TESTNET: "https://mumbai.polygonscan.com/tx/{}",
    }),
    ChainId.AVALANCHE: _evm(ChainId.AVALANCHE, 6, {
        Network.MAINNET: 43114, Network.TESTNET: 43113,
    }, {
        Network.MAINNET: "https://snowtrace.io/tx/{}",
        Network.TESTNET: "https://testnet.snowtrace.io/tx/{}",
    }),
    ChainId.OASIS: _evm(ChainId.OASIS, 7, {
        Network.MAINNET: 42262, Network.TESTNET: 42261,
    }),
    ChainId.ALGORAND: ChainInfo(
        chain=ChainId.ALGORAND,
        wormhole_id=8,
        family=AddressFamily.ALGORAND,
        native_length=32,
        encoding="app-id",
        explorers=MappingProxyType({
            Network.MAINNET: "https://algoexplorer.io/tx/{}",
            Network.TESTNET: "https://testnet.algoexplorer.io/tx/{}",
        }),
    ),
    ChainId.AURORA: _evm(ChainId.AURORA, 9, {
        Network.MAINNET: 1313161554, Network.TESTNET: 1313161555,
    }),
    ChainId.FANTOM: _evm(ChainId.FANTOM, 10, {
        Network.MAINNET: 250, Network.TESTNET: 4002,
    }, {
        Network.MAINNET: "https://ftmscan.com/tx/{}",
        Network.TESTNET: "https://testnet.ftmscan.com/tx/{}",
    }),
    ChainId.KARURA: _evm(ChainId.KARURA, 11, {
        Network.MAINNET: 686, Network.TESTNET: 596,
    }),
    ChainId.ACALA: _evm(ChainId.ACALA, 12, {
        Network.MAINNET: 787, Network.TESTNET: 597,
    }),
    ChainId.KLAYTN: _evm(ChainId.KLAYTN, 13, {
        Network.MAINNET: 8217, Network.TESTNET: 1001,
    }),
    ChainId.CELO: _evm(ChainId.CELO, 14, {
        Network.MAINNET: 42220, Network.TESTNET: 44787,
    }, {
        Network.MAINNET: "https://celoscan.io/tx/{}",
    }),
    ChainId.NEAR: ChainInfo(
        chain=ChainId.NEAR,
        wormhole_id=15,
        family=AddressFamily.NEAR,
        native_length=32,
        encoding="account-id",
        explorers=MappingProxyType({
            Network.MAINNET: "https://explorer.near.org/transactions/{}",
            Network.TESTNET: "https://explorer.testnet.near.org/transactions/{}",
        }),
    ),
    ChainId.MOONBEAM: _evm(ChainId.MOONBEAM, 16, {
        Network.MAINNET: 1284, Network.TESTNET: 1287,
    }),
    ChainId.TERRA2: _cosmos(ChainId.TERRA2, 18, "terra", ("uluna",)),
    ChainId.INJECTIVE: _cosmos(ChainId.INJECTIVE, 19, "inj", ("inj",)),
    ChainId.XPLA: _cosmos(ChainId.XPLA, 28, "xpla", ("axpla",)),
    ChainId.APTOS: ChainInfo(
        chain=ChainId.APTOS,
        wormhole_id=22,
        family=AddressFamily.ACCOUNT_HEX,
        native_length=32,
        encoding="hex",
    ),
    ChainId.SUI: ChainInfo(
        chain=ChainId.SUI,
        wormhole_id=21,
        family=AddressFamily.ACCOUNT_HEX,
        native_length=32,
        encoding="hex",
    ),
    ChainId.ARBITRUM: _evm(ChainId.ARBITRUM, 23, {
        Network.MAINNET: 42161, Network.TESTNET: 421613,
    }, {
        Network.MAINNET: "https://arbiscan.io/tx/{}",
    }),
    ChainId.OPTIMISM: _evm(ChainId.OPTIMISM, 24, {
        Network.MAINNET: 10, Network.TESTNET: 420,
    }, {
        Network.MAINNET: "https://optimistic.etherscan.io/tx/{}",
    }),
}

CHAIN_TABLE: Mapping[ChainId, ChainInfo] = MappingProxyType(_CHAIN_TABLE)


def as_chain(chain: Union[ChainId, str]) -> ChainId:
    """
    Coerce a chain name into a ChainId.

    Raises:
        UnsupportedChainError: If the name is not a supported chain
    """
    if isinstance(chain, ChainId):
        return chain
    try:
        return ChainId(str(chain).strip().lower())
    except ValueError:
        raise UnsupportedChainError(f"Unsupported chain: {chain!r}")


def as_network(network: Union[Network, str]) -> Network:
    """
    Coerce a network name (case-insensitive) into a Network.

    Raises:
        UnsupportedNetworkError: If the name is not mainnet, testnet or devnet
    """
    if isinstance(network, Network):
        return network
    try:
        return Network(str(network).strip().lower())
    except ValueError:
        choices = ", ".join(n.value for n in Network)
        raise UnsupportedNetworkError(f"Unsupported network: {network!r} (expected one of: {choices})")


def as_module(module: Union[Module, str]) -> Module:
    """
    Coerce a module name into a Module.

    Raises:
        UnsupportedModuleError: If the name is not Core, TokenBridge or NFTBridge
    """
    if isinstance(module, Module):
        return module
    try:
        return Module(module)
    except ValueError:
        choices = ", ".join(m.value for m in Module)
        raise UnsupportedModuleError(f"Unsupported module: {module!r} (expected one of: {choices})")


def get_chain_info(chain: Union[ChainId, str]) -> ChainInfo:
    """Look up the static properties of a chain."""
    return CHAIN_TABLE[as_chain(chain)]
