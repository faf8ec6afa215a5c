"""
Exceptions for the Portal bridge SDK.

Every error carries a ``kind`` that matches the name users see in CLI output
and log lines, plus flags describing whether the failure happened before or
after a transaction was broadcast.
"""
from typing import Optional


class PortalError(Exception):
    """Base exception for all SDK errors."""

    kind = "PortalError"
    # Safe to retry by constructing a fresh attempt (nothing was broadcast)
    retryable = False
    # A transaction was broadcast and its fate may not be what we report
    outcome_unknown = False

    def __init__(self, message: str, explorer_url: Optional[str] = None):
        self.explorer_url = explorer_url
        super().__init__(message)

    def user_message(self) -> str:
        """
        Build a one-line, user facing description of the error.

        Returns:
            ``"<kind>: <message>"`` plus a caveat and explorer link when the
            on-chain state may have changed
        """
        text = f"{self.kind}: {self}"
        if self.outcome_unknown:
            text += " (on-chain state may have changed"
            if self.explorer_url:
                text += f", check explorer: {self.explorer_url}"
            text += ")"
        return text


class ConfigurationError(PortalError):
    """Raised when the contract data file cannot be read or parsed."""
    kind = "ConfigurationError"


class UnsupportedChainError(PortalError):
    """Raised when a chain is not a recognized ChainId or cannot perform an action."""
    kind = "UnsupportedChainError"


class UnsupportedNetworkError(PortalError, ValueError):
    """Raised when a network name is not mainnet, testnet or devnet."""
    kind = "UnsupportedNetworkError"


class UnsupportedModuleError(PortalError, ValueError):
    """Raised when a module name is not Core, TokenBridge or NFTBridge."""
    kind = "UnsupportedModuleError"


class ModuleNotDeployedError(PortalError):
    """Raised when the registry has no address for a (network, chain, module) triple."""
    kind = "ModuleNotDeployedError"

    def __init__(self, module: str, chain: str, network: Optional[str] = None):
        self.module = module
        self.chain = chain
        self.network = network
        message = f"{module} not deployed on {chain}"
        if network:
            message += f" ({network})"
        super().__init__(message)


class InvalidAddressError(PortalError, ValueError):
    """Raised when a native address cannot be decoded for its chain."""
    kind = "InvalidAddressError"

    def __init__(self, chain: str, address: str, reason: str):
        self.chain = chain
        self.address = address
        self.reason = reason
        super().__init__(f"Invalid {chain} address {address!r}: {reason}")


class UnsupportedFeeDenomError(PortalError, ValueError):
    """Raised when a requested fee denomination is not supported on the chain."""
    kind = "UnsupportedFeeDenomError"


class InvalidRequestError(PortalError, ValueError):
    """Raised when a redemption request is malformed for the requested action."""
    kind = "InvalidRequestError"


class InvalidTransitionError(PortalError):
    """Raised when a transaction attempt is asked to make an illegal state transition."""
    kind = "InvalidTransitionError"


class SigningError(PortalError):
    """Raised by signer collaborators when signing is rejected or broadcast fails."""
    kind = "SigningError"


class WalletNotReadyError(PortalError):
    """Raised when the wallet for the target chain is not connected or ready."""
    kind = "WalletNotReadyError"
    retryable = True


class SubmissionError(PortalError):
    """Raised when signing or broadcasting a built message fails."""
    kind = "SubmissionError"
    retryable = True


class AttemptCancelledError(PortalError):
    """Raised (or recorded) when an attempt is cancelled by the caller."""
    kind = "Cancelled"

    def __init__(self, message: str, broadcast: bool = False, explorer_url: Optional[str] = None):
        self.broadcast = broadcast
        # Cancelling before the handoff to the signer leaves nothing on-chain
        self.retryable = not broadcast
        self.outcome_unknown = broadcast
        super().__init__(message, explorer_url=explorer_url)


class ConfirmationTimeoutError(PortalError, TimeoutError):
    """Raised when a broadcast transaction does not finalize within the timeout."""
    kind = "TimeoutError"
    outcome_unknown = True

    def __init__(self, message: str, submission_handle: Optional[str] = None,
                 explorer_url: Optional[str] = None):
        self.submission_handle = submission_handle
        super().__init__(message, explorer_url=explorer_url)


class ExecutionRevertedError(PortalError):
    """Raised when a transaction finalized but reverted or aborted on-chain."""
    kind = "ExecutionRevertedError"
    outcome_unknown = True

    def __init__(self, message: str, reason: Optional[str] = None,
                 submission_handle: Optional[str] = None, explorer_url: Optional[str] = None):
        self.reason = reason
        self.submission_handle = submission_handle
        super().__init__(message, explorer_url=explorer_url)


class UnexpectedAttemptError(PortalError):
    """Records a non-SDK exception raised while an attempt was running."""
    kind = "UnexpectedError"

    def __init__(self, message: str, broadcast: bool = False, explorer_url: Optional[str] = None):
        self.broadcast = broadcast
        self.outcome_unknown = broadcast
        super().__init__(message, explorer_url=explorer_url)
