"""
Entry point for the ``portal`` command.
"""
import argparse
import logging
import os
import sys
from typing import List, Optional

from portal_sdk import __version__
from portal_sdk.exceptions import PortalError

from . import contract

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="portal",
        description="Portal bridge contract and transaction tooling",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command")
    subparsers.required = True
    contract.add_parser(subparsers)
    return parser


def configure_logging(verbose: bool) -> None:
    level = "DEBUG" if verbose else os.environ.get("PORTAL_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the CLI.

    Returns:
        Process exit code: 0 on success, 1 on any SDK error
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        return args.handler(args)
    except PortalError as e:
        print(e.user_message(), file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
