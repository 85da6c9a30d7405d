"""
Shared constants and builders for the urpc SDK tests.
"""
from .documents import (
    RPC_URL, STETH, UNSTETH, BALANCE_OF, TOTAL_SUPPLY, DIRECTORY_ENTRIES,
    hex_result, rpc_response, rpc_error, build_document
)

__all__ = [
    "RPC_URL", "STETH", "UNSTETH", "BALANCE_OF", "TOTAL_SUPPLY", "DIRECTORY_ENTRIES",
    "hex_result", "rpc_response", "rpc_error", "build_document"
]
