"""
Transaction status queries.

Each query implements ``query_transaction_status(handle)`` and reports
pending, finalized or reverted.
"""
from .evm import Web3StatusQuery
from .terra import TerraLcdStatusQuery

__all__ = ["Web3StatusQuery", "TerraLcdStatusQuery"]
