"""
Data models for the Portal bridge SDK.
"""
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, field_validator, model_validator

from .chains import ChainId, Module, Network


class RedemptionAction(str, Enum):
    """What the user wants done on the target chain"""
    REDEEM = "redeem"
    WITHDRAW = "withdraw"


class TxState(str, Enum):
    """Finality state reported by a status query collaborator"""
    PENDING = "pending"
    FINALIZED = "finalized"
    REVERTED = "reverted"


class RedemptionRequest(BaseModel):
    """
    A user's intent to redeem a transfer or withdraw tokens on a target chain.

    Requests are never persisted; retrying means running a new attempt with
    the same request.
    """
    source_chain: ChainId
    target_chain: ChainId
    asset: str
    recipient_wallet: str
    fee_denom: Optional[str] = None
    action: RedemptionAction = RedemptionAction.REDEEM
    module: Module = Module.TOKEN_BRIDGE
    signed_vaa: Optional[bytes] = None
    memo: Optional[str] = None

    class Config:
        frozen = True

    @field_validator("signed_vaa", mode="before")
    @classmethod
    def _decode_vaa(cls, value: Any) -> Any:
        # Hex strings are accepted for convenience
        if isinstance(value, str):
            text = value[2:] if value.startswith("0x") else value
            try:
                return bytes.fromhex(text)
            except ValueError:
                raise ValueError("signed_vaa must be bytes or a hex string")
        return value

    @model_validator(mode="after")
    def _check_module(self) -> "RedemptionRequest":
        if self.module == Module.CORE:
            raise ValueError("Redemptions go through TokenBridge or NFTBridge, not Core")
        if self.action == RedemptionAction.WITHDRAW and self.module != Module.TOKEN_BRIDGE:
            raise ValueError("Withdrawals are only supported by the TokenBridge")
        return self


class ExecutionMessage(BaseModel):
    """A chain-specific message ready to be signed and broadcast"""
    chain: ChainId
    network: Network
    module: Module
    contract: str
    sender: str
    payload: Dict[str, Any]
    fee_denom: str
    memo: Optional[str] = None

    class Config:
        frozen = True


class TransactionStatusResult(BaseModel):
    """Result of querying a submitted transaction"""
    state: TxState
    reason: Optional[str] = None
    raw: Optional[Dict[str, Any]] = None

    @classmethod
    def pending(cls) -> "TransactionStatusResult":
        return cls(state=TxState.PENDING)

    @classmethod
    def finalized(cls, raw: Optional[Dict[str, Any]] = None) -> "TransactionStatusResult":
        return cls(state=TxState.FINALIZED, raw=raw)

    @classmethod
    def reverted(cls, reason: Optional[str] = None, raw: Optional[Dict[str, Any]] = None) -> "TransactionStatusResult":
        return cls(state=TxState.REVERTED, reason=reason, raw=raw)
