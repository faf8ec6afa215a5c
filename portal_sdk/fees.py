"""
Fee denomination selection for chains that accept several gas currencies.
"""
import logging
from typing import Dict, Mapping, Optional, Sequence, Tuple, Union

from .chains import ChainId, as_chain, get_chain_info
from .exceptions import UnsupportedFeeDenomError

logger = logging.getLogger(__name__)

# Returned for chains whose fees are paid in a single fixed currency
FIXED_FEE_DENOM = "native"


class FeeStrategySelector:
    """
    Picks the fee denomination for a transaction.

    Supported sets default to the chain table and can be overridden per chain,
    so no two chains are assumed to share a denomination set.
    """

    def __init__(self, denoms: Optional[Mapping[Union[ChainId, str], Sequence[str]]] = None):
        self._overrides: Dict[ChainId, Tuple[str, ...]] = {}
        for chain, values in (denoms or {}).items():
            self._overrides[as_chain(chain)] = tuple(values)

    def supported_denoms(self, chain: Union[ChainId, str]) -> Tuple[str, ...]:
        """Supported denominations in priority order; empty for fixed-fee chains."""
        chain = as_chain(chain)
        if chain in self._overrides:
            return self._overrides[chain]
        return get_chain_info(chain).fee_denoms

    def select(self, chain: Union[ChainId, str], user_override: Optional[str] = None) -> str:
        """
        Select the fee denomination for a chain.

        Args:
            chain: Chain the transaction will be paid on
            user_override: Denomination the user asked for, if any

        Returns:
            The override when supported, else the highest priority denomination,
            or FIXED_FEE_DENOM for chains without variable fees

        Raises:
            UnsupportedChainError: If the chain is not recognized
            UnsupportedFeeDenomError: If the override is not supported on the chain
        """
        chain = as_chain(chain)
        supported = self.supported_denoms(chain)
        if not supported:
            if user_override:
                logger.debug(f"Ignoring fee denom override {user_override!r} on fixed-fee chain {chain.value}")
            return FIXED_FEE_DENOM

        if user_override is None:
            return supported[0]
        if user_override not in supported:
            raise UnsupportedFeeDenomError(
                f"Fee denom {user_override!r} not supported on {chain.value} "
                f"(supported: {', '.join(supported)})"
            )
        return user_override


_default_selector = FeeStrategySelector()


def select_fee_denom(chain: Union[ChainId, str], user_override: Optional[str] = None) -> str:
    """Select a fee denomination using the chain table's supported sets."""
    return _default_selector.select(chain, user_override)
