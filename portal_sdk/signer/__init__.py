"""
Collaborator interfaces consumed by the orchestrator.

Signing, broadcast and wallet sessions belong to each chain's own SDK; the
orchestrator only talks to them through these protocols.
"""
from typing import Protocol, Union, runtime_checkable

from portal_sdk.chains import ChainId
from portal_sdk.models import ExecutionMessage, TransactionStatusResult


@runtime_checkable
class TransactionSubmitter(Protocol):
    """Signs and broadcasts execution messages"""

    def sign_and_broadcast(self, message: ExecutionMessage) -> str:
        """
        Sign and broadcast a message, possibly waiting on user approval.

        The orchestrator checks for cancellation before this call and again
        once it returns; a cancel requested while the call blocks is otherwise
        only seen after the handoff, when the transaction may already be
        broadcast. Implementations that can abort a pending approval may add a
        ``cancel_event: threading.Event`` keyword argument. The orchestrator
        passes the attempt's cancel event to any submitter whose
        ``sign_and_broadcast`` names that parameter, and an exception raised
        after the event is set is recorded as a cancellation with nothing
        broadcast.

        Returns:
            Submission handle (transaction hash)

        Raises:
            SigningError: If the user rejects signing or broadcast fails
        """
        ...


@runtime_checkable
class TransactionStatusQuery(Protocol):
    """Looks up the finality of a submitted transaction"""

    def query_transaction_status(self, submission_handle: str) -> TransactionStatusResult:
        ...


@runtime_checkable
class WalletReadiness(Protocol):
    """Reports whether the wallet for a chain is connected and usable"""

    def is_wallet_ready(self, chain: Union[ChainId, str]) -> bool:
        ...


__all__ = ["TransactionSubmitter", "TransactionStatusQuery", "WalletReadiness"]
