"""
Pytest fixtures for the Portal bridge SDK tests.
"""
import pytest
from unittest.mock import MagicMock

import bech32
from hypothesis import HealthCheck, settings

from portal_sdk.config import ContractConfig, OrchestratorSettings
from portal_sdk.models import RedemptionRequest, TransactionStatusResult
from portal_sdk.orchestrator import RedemptionOrchestrator
from portal_sdk.registry import ContractRegistry
from portal_sdk._rate_limited_log import reset_rate_limits

# Constants for testing
TEST_EVM_ADDRESS = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"  # EIP-55 reference vector
TEST_SOLANA_CORE = "worm2ZoG2kUd4vFXhvjh93UUH596ayRfgQ2MgjNMTth"
TEST_TERRA_RAW = bytes(range(1, 21))
TEST_VAA = bytes.fromhex("01000000000100" + "ab" * 40)
TEST_TX_HASH = "0x" + "12" * 32

# The autouse cache reset below is safe to share across generated examples
settings.register_profile("portal", suppress_health_check=[HealthCheck.function_scoped_fixture])
settings.load_profile("portal")


def terra_address(raw: bytes, prefix: str = "terra") -> str:
    """Encode raw bytes as a bech32 address."""
    return bech32.bech32_encode(prefix, bech32.convertbits(raw, 8, 5))


TEST_TERRA_WALLET = terra_address(bytes(range(101, 121)))
TEST_TERRA_TOKEN_BRIDGE = terra_address(TEST_TERRA_RAW)

TEST_CONTRACTS = {
    "mainnet": {
        "solana": {
            "Core": TEST_SOLANA_CORE,
            "TokenBridge": "wormDTUJ6AWPNvk59vGQbDvGJmqbDTdgWgAqcLBCgUb",
            "NFTBridge": "WnFt12ZrnzZrFZkt2xsNsaNWoQribnuQ5B5FrDbwDhD",
        },
        "ethereum": {
            "Core": TEST_EVM_ADDRESS,
            "TokenBridge": "0x" + "22" * 20,
            "NFTBridge": "0x" + "33" * 20,
        },
        "terra": {
            "Core": terra_address(bytes(range(21, 41))),
            "TokenBridge": TEST_TERRA_TOKEN_BRIDGE,
            "NFTBridge": None,
        },
    },
    "testnet": {
        "terra": {
            "Core": terra_address(bytes(range(41, 61))),
            "TokenBridge": terra_address(bytes(range(61, 81))),
        },
    },
}


@pytest.fixture(autouse=True)
def _reset_caches():
    """Each test starts from the bundled registry data and an empty log limiter."""
    ContractConfig.reset_cache()
    reset_rate_limits()
    yield
    ContractConfig.reset_cache()


@pytest.fixture
def registry():
    return ContractRegistry.from_mapping(TEST_CONTRACTS)


@pytest.fixture
def fast_settings():
    """Polling settings that never sleep and give up after three polls"""
    return OrchestratorSettings(poll_interval=0, max_polls=3, confirmation_timeout=60)


@pytest.fixture
def wallet():
    wallet = MagicMock()
    wallet.is_wallet_ready.return_value = True
    return wallet


@pytest.fixture
def submitter():
    submitter = MagicMock()
    submitter.sign_and_broadcast.return_value = TEST_TX_HASH
    return submitter


@pytest.fixture
def status_query():
    query = MagicMock()
    query.query_transaction_status.return_value = TransactionStatusResult.finalized()
    return query


@pytest.fixture
def terra_orchestrator(registry, submitter, status_query, wallet, fast_settings):
    return RedemptionOrchestrator(
        network="mainnet",
        chain="terra",
        submitter=submitter,
        status_query=status_query,
        wallet=wallet,
        registry=registry,
        settings=fast_settings,
    )


@pytest.fixture
def withdraw_request():
    return RedemptionRequest(
        source_chain="ethereum",
        target_chain="terra",
        asset="uluna",
        recipient_wallet=TEST_TERRA_WALLET,
        action="withdraw",
    )


@pytest.fixture
def redeem_request():
    return RedemptionRequest(
        source_chain="solana",
        target_chain="terra",
        asset="uusd",
        recipient_wallet=TEST_TERRA_WALLET,
        signed_vaa=TEST_VAA,
    )
