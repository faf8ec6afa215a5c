"""
Receipt-based status query for EVM chains.
"""
import logging
from typing import Any, Dict, Optional

from web3 import Web3
from web3.exceptions import TransactionNotFound

from portal_sdk.models import TransactionStatusResult

logger = logging.getLogger(__name__)


class Web3StatusQuery:
    """Looks up transaction receipts through a Web3 instance."""

    def __init__(self, w3: Web3, min_confirmations: int = 0):
        """
        Args:
            w3: Web3 instance connected to the chain
            min_confirmations: Blocks required on top of the receipt's block
                before it counts as final
        """
        self.w3 = w3
        self.min_confirmations = min_confirmations

    def query_transaction_status(self, submission_handle: str) -> TransactionStatusResult:
        try:
            receipt = self.w3.eth.get_transaction_receipt(submission_handle)
        except TransactionNotFound:
            return TransactionStatusResult.pending()
        if receipt is None:
            return TransactionStatusResult.pending()

        raw = self._convert_receipt(receipt)
        if self.min_confirmations > 0:
            head = self.w3.eth.block_number
            if head - raw.get("blockNumber", head) < self.min_confirmations:
                logger.debug(f"{submission_handle} mined, waiting for {self.min_confirmations} confirmations")
                return TransactionStatusResult.pending()

        if raw.get("status") == 1:
            return TransactionStatusResult.finalized(raw=raw)
        return TransactionStatusResult.reverted(reason="execution reverted (receipt status 0)", raw=raw)

    @staticmethod
    def _convert_receipt(receipt: Any) -> Dict[str, Any]:
        receipt_dict = dict(receipt)
        # Convert bytes to hex strings
        for key, value in list(receipt_dict.items()):
            if isinstance(value, bytes):
                receipt_dict[key] = "0x" + value.hex()
        return receipt_dict
