"""
Stub-based transport implementation.

This module provides an in-memory transport that answers calls from a table
of canned results instead of a network endpoint. It is used for offline
rendering and in tests.
"""
import logging
import threading
from typing import Dict, List, Optional, Tuple

from .exceptions import RemoteCallError, TransportError
from .transport import RPCTransport

# Configure logger
logger = logging.getLogger(__name__)


class StubTransport(RPCTransport):
    """
    A simple stub implementation of the RPC transport.

    Results are looked up by ``(target, calldata)``, falling back to
    ``(target, selector)`` so a stub can answer every argument combination
    of a method. Every invocation is recorded in ``calls``.
    """

    def __init__(
        self,
        results: Optional[Dict[Tuple[str, str], str]] = None,
        errors: Optional[Dict[Tuple[str, str], str]] = None,
        default: Optional[str] = None
    ):
        """
        Initialize the stub transport.

        Args:
            results: Canned results keyed by (target, calldata or selector)
            errors: Upstream error messages keyed the same way
            default: Result for calls matching neither table
        """
        self.results = dict(results or {})
        self.errors = dict(errors or {})
        self.default = default
        self.calls: List[Tuple[str, str, str, str]] = []
        self.closed = False
        self._lock = threading.Lock()

    def _lookup(self, table: Dict[Tuple[str, str], str], target: str, calldata: str) -> Optional[str]:
        for key in ((target, calldata), (target, calldata[:10])):
            if key in table:
                return table[key]
        return None

    def call(self, endpoint_url: str, call_type: str, target: str, calldata: str) -> str:
        if self.closed:
            raise TransportError("Stub transport is closed")

        with self._lock:
            self.calls.append((endpoint_url, call_type, target, calldata))
        logger.debug(f"StubTransport.call {call_type} to={target} data={calldata}")

        error = self._lookup(self.errors, target, calldata)
        if error is not None:
            raise RemoteCallError(error)

        result = self._lookup(self.results, target, calldata)
        if result is None:
            result = self.default
        if result is None:
            raise RemoteCallError(f"execution reverted: no stub result for {target} {calldata[:10]}")
        return result

    def close(self) -> None:
        self.closed = True
