"""
Sign-and-broadcast for EVM chains through web3.

Keys never pass through this module: it drives an externally owned signer
(an eth_account ``LocalAccount``, a hardware wallet adapter, ...) that
exposes ``address`` and ``sign_transaction``.
"""
import logging
import threading
from typing import Any, Dict, Optional, Protocol, Union

from web3 import Web3

from portal_sdk.chains import AddressFamily, ChainId, Network, as_chain, as_network, get_chain_info
from portal_sdk.exceptions import SigningError
from portal_sdk.models import ExecutionMessage


class Signer(Protocol):
    """Protocol for external transaction signers"""
    address: str

    def sign_transaction(self, transaction_dict: Dict[str, Any]) -> Any:
        """Sign transaction and return signed tx object"""
        ...


class Web3Submitter:
    """
    Submits EVM execution messages and reports wallet readiness.

    Implements both the TransactionSubmitter and WalletReadiness protocols.
    """

    DEFAULT_GAS = 300000
    GAS_BUFFER = 1.1

    def __init__(
        self,
        w3: Web3,
        signer: Signer,
        network: Union[Network, str],
        chain: Union[ChainId, str],
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the submitter

        Args:
            w3: Web3 instance connected to the target chain
            signer: External signer with ``address`` and ``sign_transaction``
            network: Network the node belongs to
            chain: EVM chain the node serves

        Raises:
            ValueError: If the chain is not an EVM chain
        """
        self.chain = as_chain(chain)
        self.network = as_network(network)
        self.info = get_chain_info(self.chain)
        if self.info.family != AddressFamily.EVM:
            raise ValueError(f"{self.chain.value} is not an EVM chain")
        self.w3 = w3
        self.signer = signer
        self.logger = logger or logging.getLogger(__name__)

    @property
    def expected_chain_id(self) -> Optional[int]:
        return self.info.evm_chain_ids.get(self.network)

    def is_wallet_ready(self, chain: Union[ChainId, str]) -> bool:
        """
        Check the signer is usable and the node serves the expected chain.

        Returns:
            True when the node's chain id matches the chain table
        """
        if as_chain(chain) != self.chain:
            return False
        if not getattr(self.signer, "address", None):
            self.logger.warning("Signer has no address")
            return False
        expected = self.expected_chain_id
        if expected is None:
            self.logger.warning(f"No EVM chain id known for {self.chain.value} on {self.network.value}")
            return False
        try:
            actual = self.w3.eth.chain_id
        except Exception as e:
            self.logger.warning(f"Could not read chain id from node: {e}")
            return False
        if actual != expected:
            self.logger.warning(f"Chain ID mismatch: expected {expected}, node reports {actual}")
            return False
        return True

    def sign_and_broadcast(
        self,
        message: ExecutionMessage,
        cancel_event: Optional[threading.Event] = None
    ) -> str:
        """
        Sign and send an EVM execution message.

        Args:
            message: Built EVM execution message
            cancel_event: When set before the raw transaction is sent, nothing is broadcast

        Returns:
            Transaction hash as a 0x-prefixed hex string

        Raises:
            SigningError: If the message cannot be signed or sent
        """
        if message.chain != self.chain:
            raise SigningError(f"Submitter for {self.chain.value} cannot sign {message.chain.value} messages")

        payload = message.payload
        from_address = self.signer.address
        tx: Dict[str, Any] = {
            "from": from_address,
            "to": payload["to"],
            "data": payload["data"],
            "value": payload.get("value", 0),
        }

        try:
            tx["nonce"] = self.w3.eth.get_transaction_count(from_address)
            tx["gasPrice"] = self.w3.eth.gas_price
            if self.expected_chain_id is not None:
                tx["chainId"] = self.expected_chain_id
        except Exception as e:
            raise SigningError(f"Failed to prepare transaction: {e}") from e

        try:
            gas = self.w3.eth.estimate_gas(tx)
            tx["gas"] = int(gas * self.GAS_BUFFER)
            self.logger.debug(f"Estimated gas: {tx['gas']}")
        except Exception as e:
            tx["gas"] = self.DEFAULT_GAS
            self.logger.warning(f"Gas estimation failed, using default: {self.DEFAULT_GAS}. Error: {e}")

        try:
            signed_tx = self.signer.sign_transaction(tx)
        except Exception as e:
            self.logger.error(f"Transaction signing failed: {e}")
            raise SigningError(f"Failed to sign transaction: {e}") from e

        raw_tx = getattr(signed_tx, "raw_transaction", None) or getattr(signed_tx, "rawTransaction")
        if cancel_event is not None and cancel_event.is_set():
            raise SigningError("Cancelled after signing; transaction was not sent")
        try:
            tx_hash = self.w3.eth.send_raw_transaction(raw_tx)
        except Exception as e:
            self.logger.error(f"Failed to send transaction: {e}")
            raise SigningError(f"Failed to send transaction: {e}") from e

        if isinstance(tx_hash, (bytes, bytearray)):
            tx_hash = "0x" + bytes(tx_hash).hex()
        self.logger.info(f"Transaction sent: {tx_hash}")
        return tx_hash
