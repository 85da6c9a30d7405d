#!/usr/bin/env python3
"""
Simple example of evaluating single call strings.
"""
import os

from urpc_sdk import URPCClient, SymbolDirectory


def main():
    """
    Demonstrate basic usage of the URPCClient.

    This example shows how to:
    1. Build a symbol directory from declarations
    2. Evaluate call strings one at a time
    """
    rpc_url = os.environ.get("RPC_URL", "https://eth.llamarpc.com")

    directory = SymbolDirectory.from_declarations([
        "stETH:0xae7ab96520DE3A18E5e111B5EaAb095312D7fE84",
        "unstETH:0x889edC2eDab5f40e902b864aD4d7AdE8E412F9B1",
        "balanceOf(address):0x70a08231",
        "totalSupply():0x18160ddd",
        "dec:18",
    ])

    with URPCClient(rpc_url) as client:
        for call_string in (
            "$stETH.totalSupply().$dec",
            "$stETH.balanceOf($unstETH).18",
            "$stETH.totalSupply()",
        ):
            print(f"{call_string} = {client.call(call_string, directory)}")


if __name__ == "__main__":
    main()
