#!/usr/bin/env python3
"""
Example of withdrawing native tokens from the Terra token bridge.

Terra signing lives in the wallet (a browser extension or the chain SDK), so
this example plugs in a submitter that prints the message and reads the
transaction hash back from the user.
"""
import json
import os
import logging

from portal_sdk import ExecutionMessage, RedemptionOrchestrator, RedemptionRequest
from portal_sdk.status import TerraLcdStatusQuery

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class ManualTerraWallet:
    """Hands the message to a human and trusts them to sign it."""

    def is_wallet_ready(self, chain) -> bool:
        return True

    def sign_and_broadcast(self, message: ExecutionMessage) -> str:
        print("Sign and broadcast this message with your Terra wallet:")
        print(json.dumps(message.payload, indent=2))
        print(f"memo: {message.memo}, fee denom: {message.fee_denom}")
        return input("Transaction hash: ").strip()


def main():
    """
    Withdraw a native denom held by the token bridge.

    Optional environment:
        NETWORK (default testnet), TERRA_WALLET, DENOM (default uluna),
        FEE_DENOM, PORTAL_TERRA_<NETWORK>_RPC_URL
    """
    NETWORK = os.environ.get("NETWORK", "testnet")
    WALLET = os.environ.get("TERRA_WALLET")
    if not WALLET:
        print("ERROR: TERRA_WALLET environment variable is required")
        return

    wallet = ManualTerraWallet()
    orchestrator = RedemptionOrchestrator(
        network=NETWORK,
        chain="terra",
        submitter=wallet,
        status_query=TerraLcdStatusQuery.from_network(NETWORK),
        wallet=wallet,
    )

    request = RedemptionRequest(
        source_chain="terra",
        target_chain="terra",
        asset=os.environ.get("DENOM", "uluna"),
        recipient_wallet=WALLET,
        fee_denom=os.environ.get("FEE_DENOM"),
        action="withdraw",
    )

    attempt = orchestrator.execute(request)
    print(attempt.describe())


if __name__ == "__main__":
    main()
