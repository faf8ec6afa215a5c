"""
Portal bridge SDK.

Resolves bridge contract addresses, normalizes them into canonical 32-byte
emitter addresses, and drives redemption/withdrawal transactions to
finality.
"""
from .version import __version__
from .chains import ChainId, Network, Module, AddressFamily, ChainInfo, CHAIN_TABLE, get_chain_info
from .config import ContractConfig, OrchestratorSettings
from .registry import ContractRegistry, resolve, get_default_registry
from .codecs import AddressCodec, get_codec, register_codec
from .emitter import EmitterAddress, to_emitter_address
from .fees import FeeStrategySelector, select_fee_denom, FIXED_FEE_DENOM
from .models import (
    RedemptionAction, RedemptionRequest, ExecutionMessage, TransactionStatusResult, TxState
)
from .messages import build_message
from .explorer import tx_url
from .orchestrator import AttemptStatus, TransactionAttempt, RedemptionOrchestrator
from .exceptions import (
    PortalError, ConfigurationError, UnsupportedChainError, UnsupportedNetworkError,
    UnsupportedModuleError, ModuleNotDeployedError, InvalidAddressError, UnsupportedFeeDenomError,
    InvalidRequestError, InvalidTransitionError, SigningError, WalletNotReadyError, SubmissionError,
    AttemptCancelledError, ConfirmationTimeoutError, ExecutionRevertedError, UnexpectedAttemptError
)

__all__ = [
    "__version__",
    "ChainId", "Network", "Module", "AddressFamily", "ChainInfo", "CHAIN_TABLE", "get_chain_info",
    "ContractConfig", "OrchestratorSettings",
    "ContractRegistry", "resolve", "get_default_registry",
    "AddressCodec", "get_codec", "register_codec",
    "EmitterAddress", "to_emitter_address",
    "FeeStrategySelector", "select_fee_denom", "FIXED_FEE_DENOM",
    "RedemptionAction", "RedemptionRequest", "ExecutionMessage", "TransactionStatusResult", "TxState",
    "build_message", "tx_url",
    "AttemptStatus", "TransactionAttempt", "RedemptionOrchestrator",
    "PortalError", "ConfigurationError", "UnsupportedChainError", "UnsupportedNetworkError", "UnsupportedModuleError",
    "ModuleNotDeployedError", "InvalidAddressError", "UnsupportedFeeDenomError", "InvalidRequestError",
    "InvalidTransitionError", "SigningError", "WalletNotReadyError", "SubmissionError",
    "AttemptCancelledError", "ConfirmationTimeoutError", "ExecutionRevertedError",
    "UnexpectedAttemptError",
]
