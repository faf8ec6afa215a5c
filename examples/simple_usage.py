#!/usr/bin/env python3
"""
Simple example of looking up bridge contracts with the Portal bridge SDK.
"""
import os

from portal_sdk import (
    ContractConfig, Module, ModuleNotDeployedError, get_default_registry, to_emitter_address
)


def main():
    """
    Demonstrate contract resolution and emitter address normalization.

    This example shows how to:
    1. List the chains configured for a network
    2. Resolve each bridge module's native address
    3. Convert it to the 32-byte emitter format
    """
    NETWORK = os.environ.get("NETWORK", "mainnet")

    print("Available networks:")
    for network_name in ContractConfig.load_contracts().keys():
        print(f"  - {network_name}")
    print()

    registry = get_default_registry()
    for chain in registry.chains(NETWORK):
        print(f"{chain.value}:")
        for module in Module:
            try:
                address = registry.resolve(NETWORK, chain, module)
            except ModuleNotDeployedError:
                print(f"  {module.value:<12} not deployed")
                continue
            emitter = to_emitter_address(chain, address)
            print(f"  {module.value:<12} {address}")
            print(f"  {'':<12} emitter {emitter.hex()}")


if __name__ == "__main__":
    main()
