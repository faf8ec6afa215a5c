"""
Chain-specific execution message builders.

Builders only shape data; signing, fee estimation and broadcast belong to the
submitter collaborator.
"""
import base64
import logging
from typing import Any, Dict, Union

from eth_abi import encode
from web3 import Web3

from .chains import AddressFamily, Network, as_network, get_chain_info
from .exceptions import InvalidRequestError, UnsupportedChainError
from .models import ExecutionMessage, RedemptionAction, RedemptionRequest

logger = logging.getLogger(__name__)

WITHDRAW_MEMO = "Wormhole - Withdraw Tokens"
REDEEM_MEMO = "Wormhole - Complete Transfer"

COMPLETE_TRANSFER_SIGNATURE = "completeTransfer(bytes)"


def _cosmos_execute(sender: str, contract: str, execute_msg: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "type": "wasm/MsgExecuteContract",
        "sender": sender,
        "contract": contract,
        "execute_msg": execute_msg,
        "coins": {},
    }


def build_withdraw_payload(request: RedemptionRequest, contract: str, sender: str) -> Dict[str, Any]:
    """
    Build a token bridge ``withdraw_tokens`` execute message.

    Raises:
        UnsupportedChainError: If the target chain's token bridge has no withdraw
        InvalidRequestError: If the asset is not a withdrawable native denom
    """
    info = get_chain_info(request.target_chain)
    if info.family != AddressFamily.COSMOS or not info.withdraw_denoms:
        raise UnsupportedChainError(f"Token withdrawal is not supported on {info.chain.value}")
    if request.asset not in info.withdraw_denoms:
        raise InvalidRequestError(
            f"Cannot withdraw {request.asset!r} on {info.chain.value} "
            f"(supported: {', '.join(info.withdraw_denoms)})"
        )
    return _cosmos_execute(sender, contract, {
        "withdraw_tokens": {
            "asset": {
                "native_token": {
                    "denom": request.asset,
                },
            },
        },
    })


def build_redeem_payload(request: RedemptionRequest, contract: str, sender: str) -> Dict[str, Any]:
    """
    Build the payload that submits a signed VAA to the target chain's bridge.

    Raises:
        InvalidRequestError: If the request has no signed VAA
    """
    if not request.signed_vaa:
        raise InvalidRequestError("Redeem requests require a signed VAA")

    vaa = request.signed_vaa
    family = get_chain_info(request.target_chain).family

    if family == AddressFamily.COSMOS:
        return _cosmos_execute(sender, contract, {
            "submit_vaa": {
                "data": base64.b64encode(vaa).decode("ascii"),
            },
        })

    if family == AddressFamily.EVM:
        selector = Web3.keccak(text=COMPLETE_TRANSFER_SIGNATURE)[:4]
        data = bytes(selector) + encode(["bytes"], [vaa])
        return {
            "from": sender,
            "to": Web3.to_checksum_address(contract),
            "data": "0x" + data.hex(),
            "value": 0,
        }

    # Account-model chains post the VAA and complete in the chain SDK
    return {
        "program": contract,
        "payer": sender,
        "instruction": "complete_transfer",
        "vaa": vaa.hex(),
    }


def build_message(
    network: Union[Network, str],
    request: RedemptionRequest,
    contract: str,
    sender: str,
    fee_denom: str
) -> ExecutionMessage:
    """
    Build the execution message for a redemption request.

    Args:
        network: Network the message targets
        request: The redemption or withdrawal intent
        contract: Resolved native address of the bridge contract
        sender: Wallet address that will sign the transaction
        fee_denom: Selected fee denomination

    Returns:
        ExecutionMessage for the target chain
    """
    if request.action == RedemptionAction.WITHDRAW:
        payload = build_withdraw_payload(request, contract, sender)
        memo = request.memo or WITHDRAW_MEMO
    else:
        payload = build_redeem_payload(request, contract, sender)
        memo = request.memo or REDEEM_MEMO

    logger.debug(f"Built {request.action.value} message for {request.target_chain.value} contract {contract}")
    return ExecutionMessage(
        chain=request.target_chain,
        network=as_network(network),
        module=request.module,
        contract=contract,
        sender=sender,
        payload=payload,
        fee_denom=fee_denom,
        memo=memo,
    )
