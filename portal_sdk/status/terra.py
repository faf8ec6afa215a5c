"""
Status query for Cosmos-SDK chains through an LCD endpoint.
"""
import logging
import urllib.parse
from typing import Optional, Union

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from portal_sdk.chains import ChainId, Network
from portal_sdk.config import ContractConfig
from portal_sdk.models import TransactionStatusResult

logger = logging.getLogger(__name__)


class TerraLcdStatusQuery:
    """
    Polls ``/cosmos/tx/v1beta1/txs/{hash}`` for a transaction's result.

    A transaction the node does not know yet is pending; a known transaction
    with a non-zero ``code`` reverted, and ``raw_log`` is the reason.
    """

    TX_PATH = "/cosmos/tx/v1beta1/txs/"

    def __init__(
        self,
        lcd_url: str,
        session: Optional[requests.Session] = None,
        retry_count: int = 3,
        timeout: int = 30
    ):
        """
        Args:
            lcd_url: LCD endpoint URL, https unless localhost
            session: Optional pre-configured requests session
            retry_count: Number of retries for HTTP requests
            timeout: Timeout for HTTP requests in seconds

        Raises:
            ValueError: If the URL does not use https and is not local
        """
        parsed = urllib.parse.urlparse(lcd_url)
        is_local = (parsed.hostname or "") in ("localhost", "127.0.0.1", "::1")
        if parsed.scheme != "https" and not is_local:
            raise ValueError(f"lcd_url must use https:// for security (got: {parsed.scheme}://)")

        self.lcd_url = lcd_url.rstrip("/")
        self.timeout = timeout
        if session is None:
            session = requests.Session()
            retries = Retry(
                total=retry_count,
                backoff_factor=0.5,
                status_forcelist=[500, 502, 503, 504],
                allowed_methods=["GET"],
                raise_on_status=False,
            )
            session.mount("http://", HTTPAdapter(max_retries=retries))
            session.mount("https://", HTTPAdapter(max_retries=retries))
        self.session = session

    @classmethod
    def from_network(
        cls,
        network: Union[Network, str],
        chain: Union[ChainId, str] = ChainId.TERRA,
        lcd_url: Optional[str] = None,
        **kwargs
    ) -> "TerraLcdStatusQuery":
        """
        Create a query for the configured LCD of a chain.

        Raises:
            ValueError: If no LCD endpoint is configured
        """
        url = ContractConfig.get_rpc_url(network, chain, override=lcd_url)
        if not url:
            raise ValueError(f"No LCD endpoint configured for {chain} on {network}")
        return cls(url, **kwargs)

    def query_transaction_status(self, submission_handle: str) -> TransactionStatusResult:
        """
        Query a transaction by hash.

        Raises:
            requests.RequestException: For transport errors and unexpected HTTP statuses
        """
        response = self.session.get(f"{self.lcd_url}{self.TX_PATH}{submission_handle}", timeout=self.timeout)

        # LCDs answer 404 (or 400 on older versions) until the tx is indexed
        if response.status_code in (400, 404):
            logger.debug(f"{submission_handle} not found yet ({response.status_code})")
            return TransactionStatusResult.pending()
        response.raise_for_status()

        data = response.json()
        tx_response = data.get("tx_response") or {}
        if not tx_response:
            return TransactionStatusResult.pending()

        code = int(tx_response.get("code") or 0)
        if code != 0:
            raw_log = tx_response.get("raw_log", "")
            return TransactionStatusResult.reverted(
                reason=f"error code {code}: {raw_log}",
                raw=tx_response,
            )
        return TransactionStatusResult.finalized(raw=tx_response)
