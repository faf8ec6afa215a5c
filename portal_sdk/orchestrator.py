"""
Redemption/withdrawal orchestration.

A ``TransactionAttempt`` walks a fixed state machine::

    idle -> validating -> building -> awaiting_signature -> submitted
         -> confirming -> succeeded | failed

Any state before ``succeeded`` may move to ``failed``. Terminal states are
final, and ``submitted`` is entered at most once per attempt, so a single
attempt can never broadcast twice. Retrying means running a new attempt.
"""
import inspect
import logging
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Union

from .chains import ChainId, Network, as_chain, as_network
from .config import OrchestratorSettings
from .exceptions import (
    PortalError, InvalidRequestError, InvalidTransitionError, WalletNotReadyError,
    SubmissionError, AttemptCancelledError, ConfirmationTimeoutError, ExecutionRevertedError,
    UnexpectedAttemptError
)
from .explorer import tx_url
from .fees import FeeStrategySelector
from .messages import build_message
from .models import (
    ExecutionMessage, RedemptionAction, RedemptionRequest, TransactionStatusResult, TxState
)
from .registry import ContractRegistry, get_default_registry
from .signer import TransactionStatusQuery, TransactionSubmitter, WalletReadiness
from ._rate_limited_log import rate_limited_log

logger = logging.getLogger(__name__)


def _accepts_cancel_event(submitter) -> bool:
    """True when the submitter's sign_and_broadcast takes a ``cancel_event`` keyword."""
    try:
        params = inspect.signature(submitter.sign_and_broadcast).parameters
    except (TypeError, ValueError):
        return False
    return "cancel_event" in params


class AttemptStatus(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    BUILDING = "building"
    AWAITING_SIGNATURE = "awaiting_signature"
    SUBMITTED = "submitted"
    CONFIRMING = "confirming"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


TERMINAL_STATUSES: FrozenSet[AttemptStatus] = frozenset({AttemptStatus.SUCCEEDED, AttemptStatus.FAILED})

_TRANSITIONS: Dict[AttemptStatus, FrozenSet[AttemptStatus]] = {
    AttemptStatus.IDLE: frozenset({AttemptStatus.VALIDATING}),
    AttemptStatus.VALIDATING: frozenset({AttemptStatus.BUILDING, AttemptStatus.FAILED}),
    AttemptStatus.BUILDING: frozenset({AttemptStatus.AWAITING_SIGNATURE, AttemptStatus.FAILED}),
    AttemptStatus.AWAITING_SIGNATURE: frozenset({AttemptStatus.SUBMITTED, AttemptStatus.FAILED}),
    AttemptStatus.SUBMITTED: frozenset({AttemptStatus.CONFIRMING, AttemptStatus.FAILED}),
    AttemptStatus.CONFIRMING: frozenset({AttemptStatus.SUCCEEDED, AttemptStatus.FAILED}),
    AttemptStatus.SUCCEEDED: frozenset(),
    AttemptStatus.FAILED: frozenset(),
}


@dataclass
class TransactionAttempt:
    """
    One try at executing a RedemptionRequest.

    Attributes:
        request: The intent being executed
        built_message: Message handed to the submitter, once built
        submission_handle: Transaction identifier, once broadcast
        status: Current state
        error: Recorded failure, when status is failed
        history: Every state visited, in order
    """
    request: RedemptionRequest
    built_message: Optional[ExecutionMessage] = None
    submission_handle: Optional[str] = None
    status: AttemptStatus = AttemptStatus.IDLE
    error: Optional[PortalError] = None
    history: List[AttemptStatus] = field(default_factory=lambda: [AttemptStatus.IDLE])
    _cancel_event: threading.Event = field(default_factory=threading.Event, repr=False, compare=False)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def succeeded(self) -> bool:
        return self.status == AttemptStatus.SUCCEEDED

    @property
    def cancel_requested(self) -> bool:
        return self._cancel_event.is_set()

    def cancel(self) -> None:
        """Ask the orchestrator to stop this attempt. Safe to call from any thread."""
        self._cancel_event.set()

    def wait_for_cancel(self, timeout: float) -> bool:
        """Sleep up to ``timeout`` seconds, returning early (True) if cancelled."""
        return self._cancel_event.wait(timeout)

    def transition(self, new_status: AttemptStatus) -> None:
        """
        Move to ``new_status``.

        Raises:
            InvalidTransitionError: If the move is not allowed from the current state
        """
        if new_status not in _TRANSITIONS[self.status]:
            raise InvalidTransitionError(
                f"Illegal attempt transition {self.status.value} -> {new_status.value}"
            )
        self.status = new_status
        self.history.append(new_status)

    def record_submission(self, handle: str) -> None:
        """Store the submission handle and enter ``submitted`` (possible only once)."""
        self.transition(AttemptStatus.SUBMITTED)
        self.submission_handle = handle

    def fail(self, error: PortalError) -> None:
        self.transition(AttemptStatus.FAILED)
        self.error = error

    def raise_for_status(self) -> None:
        """
        Raise the recorded error, if any.

        Raises:
            PortalError: The error that failed this attempt
        """
        if self.error is not None:
            raise self.error

    def describe(self) -> str:
        """Short user-facing summary of the attempt's outcome."""
        if self.succeeded:
            return f"Transaction confirmed: {self.submission_handle}"
        if self.error is not None:
            return self.error.user_message()
        return f"Attempt {self.status.value}"


class RedemptionOrchestrator:
    """
    Drives redemption and withdrawal attempts on one target chain.

    The orchestrator holds no cross-request state; callers must not hand it
    two in-flight attempts for the same wallet.
    """

    def __init__(
        self,
        network: Union[Network, str],
        chain: Union[ChainId, str],
        submitter: TransactionSubmitter,
        status_query: TransactionStatusQuery,
        wallet: WalletReadiness,
        registry: Optional[ContractRegistry] = None,
        fee_selector: Optional[FeeStrategySelector] = None,
        settings: Optional[OrchestratorSettings] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the orchestrator

        Args:
            network: Network the target chain runs on
            chain: Target chain this orchestrator submits to
            submitter: Sign-and-broadcast collaborator for the chain
            status_query: Transaction status collaborator for the chain
            wallet: Wallet readiness collaborator
            registry: Contract registry (defaults to the bundled registry)
            fee_selector: Fee denomination policy (defaults to the chain table)
            settings: Polling settings (defaults to ``OrchestratorSettings.from_env()``)
            logger: Optional logger instance to use for debug/info logging
        """
        self.network = as_network(network)
        self.chain = as_chain(chain)
        self.submitter = submitter
        self.status_query = status_query
        self.wallet = wallet
        self.registry = registry if registry is not None else get_default_registry()
        self.fee_selector = fee_selector or FeeStrategySelector()
        self.settings = settings or OrchestratorSettings.from_env()
        self.logger = logger or logging.getLogger(__name__)

    def new_attempt(self, request: RedemptionRequest) -> TransactionAttempt:
        return TransactionAttempt(request=request)

    def execute(self, request: RedemptionRequest) -> TransactionAttempt:
        """Run a fresh attempt for ``request`` to a terminal state."""
        return self.run(self.new_attempt(request))

    def run(self, attempt: TransactionAttempt) -> TransactionAttempt:
        """
        Drive an idle attempt to ``succeeded`` or ``failed``.

        Failures are recorded on the attempt rather than raised, so a caller
        that cancelled and stopped observing never sees an exception. Use
        ``attempt.raise_for_status()`` to surface the error.

        Args:
            attempt: A new attempt in the ``idle`` state

        Returns:
            The same attempt, now terminal

        Raises:
            InvalidTransitionError: If the attempt has already been run
        """
        if attempt.status != AttemptStatus.IDLE:
            raise InvalidTransitionError(
                f"Attempt already {attempt.status.value}; create a new attempt to retry"
            )

        try:
            self._validate(attempt)
            message = self._build(attempt)
            self._submit(attempt, message)
            self._confirm(attempt)
        except PortalError as e:
            attempt.fail(e)
        except Exception as e:
            self.logger.error(f"Unexpected error while {attempt.status.value}: {e}")
            attempt.fail(self._unexpected(attempt, e))

        if attempt.succeeded:
            self.logger.info(f"Attempt succeeded on {self.chain.value}: {attempt.submission_handle}")
        elif isinstance(attempt.error, AttemptCancelledError):
            self.logger.info(f"Attempt cancelled: {attempt.error}")
        else:
            self.logger.warning(f"Attempt failed: {attempt.error.user_message()}")
        return attempt

    def _advance(self, attempt: TransactionAttempt, status: AttemptStatus) -> None:
        self.logger.debug(f"Attempt {attempt.status.value} -> {status.value}")
        attempt.transition(status)

    def _validate(self, attempt: TransactionAttempt) -> None:
        self._advance(attempt, AttemptStatus.VALIDATING)
        request = attempt.request

        if request.target_chain != self.chain:
            raise WalletNotReadyError(
                f"Wallet is set up for {self.chain.value}, but the request targets {request.target_chain.value}"
            )
        try:
            ready = self.wallet.is_wallet_ready(request.target_chain)
        except Exception as e:
            self.logger.error(f"Wallet readiness check failed: {e}")
            raise WalletNotReadyError(f"Wallet readiness check failed for {self.chain.value}: {e}") from e
        if not ready:
            raise WalletNotReadyError(f"Wallet not ready for {self.chain.value}")

        if request.action == RedemptionAction.REDEEM and not request.signed_vaa:
            raise InvalidRequestError("Redeem requests require a signed VAA")

    def _build(self, attempt: TransactionAttempt) -> ExecutionMessage:
        self._advance(attempt, AttemptStatus.BUILDING)
        request = attempt.request

        contract = self.registry.resolve(self.network, request.target_chain, request.module)
        fee_denom = self.fee_selector.select(request.target_chain, request.fee_denom)
        try:
            message = build_message(self.network, request, contract, request.recipient_wallet, fee_denom)
        except PortalError:
            raise
        except Exception as e:
            raise InvalidRequestError(
                f"Cannot build {request.action.value} message for {contract} on {self.chain.value}: {e}"
            ) from e
        attempt.built_message = message
        return message

    def _submit(self, attempt: TransactionAttempt, message: ExecutionMessage) -> None:
        self._advance(attempt, AttemptStatus.AWAITING_SIGNATURE)

        if attempt.cancel_requested:
            raise AttemptCancelledError("Cancelled before signing; nothing was broadcast")

        try:
            if _accepts_cancel_event(self.submitter):
                handle = self.submitter.sign_and_broadcast(message, cancel_event=attempt._cancel_event)
            else:
                handle = self.submitter.sign_and_broadcast(message)
        except Exception as e:
            if attempt.cancel_requested:
                raise AttemptCancelledError(
                    f"Cancelled while awaiting signature; nothing was broadcast ({e})"
                ) from e
            self.logger.error(f"Failed to sign or broadcast transaction: {e}")
            raise SubmissionError(f"Failed to submit transaction: {e}") from e
        if not handle:
            raise SubmissionError("Submitter returned an empty submission handle")

        attempt.record_submission(str(handle))
        self.logger.info(f"Transaction sent on {self.chain.value}: {attempt.submission_handle}")

    def _confirm(self, attempt: TransactionAttempt) -> None:
        self._advance(attempt, AttemptStatus.CONFIRMING)
        handle = attempt.submission_handle
        explorer_url = tx_url(self.network, self.chain, handle)
        settings = self.settings
        deadline = time.monotonic() + settings.confirmation_timeout
        polls = 0

        while True:
            if attempt.cancel_requested:
                raise AttemptCancelledError(
                    f"Stopped waiting for {handle}; the transaction was already broadcast",
                    broadcast=True,
                    explorer_url=explorer_url,
                )

            result = self._query(handle)
            polls += 1

            if result.state == TxState.FINALIZED:
                self._advance(attempt, AttemptStatus.SUCCEEDED)
                return
            if result.state == TxState.REVERTED:
                reason = result.reason or "no reason reported"
                raise ExecutionRevertedError(
                    f"Transaction {handle} reverted on {self.chain.value}: {reason}",
                    reason=result.reason,
                    submission_handle=handle,
                    explorer_url=explorer_url,
                )

            remaining = deadline - time.monotonic()
            if polls >= settings.max_polls or remaining <= 0:
                raise ConfirmationTimeoutError(
                    f"Transaction {handle} not finalized after {polls} polls; outcome unknown",
                    submission_handle=handle,
                    explorer_url=explorer_url,
                )

            attempt.wait_for_cancel(min(settings.delay_for(polls), remaining))

    def _unexpected(self, attempt: TransactionAttempt, error: Exception) -> UnexpectedAttemptError:
        broadcast = attempt.submission_handle is not None
        explorer_url = tx_url(self.network, self.chain, attempt.submission_handle) if broadcast else None
        return UnexpectedAttemptError(
            f"{type(error).__name__} while {attempt.status.value}: {error}",
            broadcast=broadcast,
            explorer_url=explorer_url,
        )

    def _query(self, handle: str) -> TransactionStatusResult:
        # Lookup failures are expected while a transaction propagates
        try:
            result = self.status_query.query_transaction_status(handle)
            if not isinstance(result, TransactionStatusResult):
                result = TransactionStatusResult.model_validate(result)
        except Exception as e:
            rate_limited_log(
                f"Status query for {handle} failed, will retry: {e}",
                level="warning",
                logger_instance=self.logger,
            )
            return TransactionStatusResult.pending()
        return result
