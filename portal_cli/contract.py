"""
``contract`` command: print a bridge contract address.
"""
import argparse
import logging
from typing import Optional

from portal_sdk.chains import ChainId, Module, Network, as_network
from portal_sdk.emitter import to_emitter_address
from portal_sdk.registry import ContractRegistry, resolve

logger = logging.getLogger(__name__)


def add_parser(subparsers) -> argparse.ArgumentParser:
    """Register the ``contract`` subcommand."""
    parser = subparsers.add_parser(
        "contract",
        help="Print contract address",
        description="Print the address of a deployed bridge contract",
    )
    parser.add_argument(
        "network",
        type=str.lower,
        choices=[n.value for n in Network],
        help="Network",
    )
    parser.add_argument(
        "chain",
        choices=[c.value for c in ChainId],
        help="Chain to query",
    )
    parser.add_argument(
        "module",
        choices=[m.value for m in Module],
        help="Module to query",
    )
    parser.add_argument(
        "-e", "--emitter",
        action="store_true",
        default=False,
        help="Print in emitter address format",
    )
    parser.set_defaults(handler=handle)
    return parser


def contract_address(network: str, chain: str, module: str, emitter: bool = False,
                     registry: Optional[ContractRegistry] = None) -> str:
    """
    Resolve an address, optionally converted to emitter format.

    Raises:
        PortalError: For unknown chains, undeployed modules or undecodable addresses
    """
    address = resolve(as_network(network), chain, module, registry=registry)
    if emitter:
        address = to_emitter_address(chain, address).hex()
    logger.debug(f"Resolved {module} on {chain} ({network}): {address}")
    return address


def handle(args: argparse.Namespace) -> int:
    print(contract_address(args.network, args.chain, args.module, emitter=args.emitter))
    return 0
