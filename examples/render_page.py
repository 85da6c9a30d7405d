#!/usr/bin/env python3
"""
Render an HTML page containing inline urpc calls.
"""
import os
import sys
import logging

from urpc_sdk import URPCClient, URPCConfig, DocumentRenderer, InspectorView, URPCError

# Configure logging
logging.basicConfig(level=logging.INFO)

PAGE = """<html>
<body>
<u-url>
  {rpc_url}
</u-url>
<u-directory>
  <var>stETH:0xae7ab96520DE3A18E5e111B5EaAb095312D7fE84</var>
  <var>unstETH:0x889edC2eDab5f40e902b864aD4d7AdE8E412F9B1</var>
  <var>balanceOf(address):0x70a08231</var>
  <var>totalSupply():0x18160ddd</var>
</u-directory>
<p>stETH supply: <u-c key="supply">$stETH.totalSupply().18</u-c></p>
<p>Withdrawal queue holds <u-c>$stETH.balanceOf($unstETH).18</u-c> stETH</p>
</body>
</html>
"""


def main():
    """
    Demonstrate batch rendering.

    This example shows how to:
    1. Build a client from URPC_* environment variables
    2. Render a page with the inspector view
    3. Look up individual results by key
    """
    rpc_url = os.environ.get("RPC_URL", "https://eth.llamarpc.com")
    path = sys.argv[1] if len(sys.argv) > 1 else None

    if path:
        with open(path, encoding="utf-8") as f:
            text = f.read()
    else:
        text = PAGE.format(rpc_url=rpc_url)

    with URPCClient(config=URPCConfig.from_env()) as client:
        renderer = DocumentRenderer(client, view=InspectorView())
        try:
            rendered = renderer.render_sync(text)
        except URPCError as e:
            print(f"Could not render document: {e}")
            return

    print(rendered.rendered_text)
    for key, result in rendered.results_by_key.items():
        status = result.display_value if result.ok else f"failed ({result.error})"
        print(f"{key}: {status}")


if __name__ == "__main__":
    main()
