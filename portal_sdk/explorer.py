"""
Block explorer links for submitted transactions.
"""
from typing import Optional, Union

from .chains import ChainId, Network, as_network, get_chain_info


def tx_url(network: Union[Network, str], chain: Union[ChainId, str], tx_hash: Union[str, bytes]) -> Optional[str]:
    """
    Get a block explorer URL for a transaction.

    Args:
        network: Network the transaction was sent on
        chain: Chain the transaction was sent on
        tx_hash: Submission handle, as a string or raw bytes

    Returns:
        Explorer URL, or None when no explorer is known for the chain/network
    """
    template = get_chain_info(chain).explorers.get(as_network(network))
    if template is None:
        return None
    if isinstance(tx_hash, (bytes, bytearray)):
        tx_hash = "0x" + bytes(tx_hash).hex()
    return template.format(tx_hash)
