#!/usr/bin/env python3
"""
Example of redeeming a signed VAA on an EVM chain.
"""
import os
import logging

from eth_account import Account
from web3 import Web3

from portal_sdk import ContractConfig, RedemptionOrchestrator, RedemptionRequest
from portal_sdk.signer.web3_signer import Web3Submitter
from portal_sdk.status import Web3StatusQuery

# Configure logging
logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger("evm-redeem-example")


def main():
    """
    Submit ``completeTransfer`` for a VAA and wait for the receipt.

    Required environment:
        PRIVATE_KEY: Key of the wallet paying for the redemption
        SIGNED_VAA: Hex encoded signed VAA

    Optional environment:
        NETWORK (default testnet), CHAIN (default ethereum), RPC_URL
    """
    PRIVATE_KEY = os.environ.get("PRIVATE_KEY")
    SIGNED_VAA = os.environ.get("SIGNED_VAA")
    NETWORK = os.environ.get("NETWORK", "testnet")
    CHAIN = os.environ.get("CHAIN", "ethereum")

    if not PRIVATE_KEY or not SIGNED_VAA:
        print("ERROR: PRIVATE_KEY and SIGNED_VAA environment variables are required")
        return

    rpc_url = ContractConfig.get_rpc_url(NETWORK, CHAIN, override=os.environ.get("RPC_URL"))
    if not rpc_url:
        print(f"ERROR: no RPC URL configured for {CHAIN} on {NETWORK}; set RPC_URL")
        return

    w3 = Web3(Web3.HTTPProvider(rpc_url))
    account = Account.from_key(PRIVATE_KEY)
    submitter = Web3Submitter(w3, account, NETWORK, CHAIN)

    orchestrator = RedemptionOrchestrator(
        network=NETWORK,
        chain=CHAIN,
        submitter=submitter,
        status_query=Web3StatusQuery(w3, min_confirmations=1),
        wallet=submitter,
    )

    request = RedemptionRequest(
        source_chain=os.environ.get("SOURCE_CHAIN", "solana"),
        target_chain=CHAIN,
        asset=os.environ.get("ASSET", ""),
        recipient_wallet=account.address,
        signed_vaa=SIGNED_VAA,
    )

    attempt = orchestrator.execute(request)
    print(attempt.describe())
    if attempt.error is not None and attempt.error.retryable:
        print("Nothing was broadcast; it is safe to try again.")


if __name__ == "__main__":
    main()
