"""
Transport layer for JSON-RPC calls.

This module defines the interface every transport implements and the default
HTTP implementation. Transports are synchronous; the async client runs them
off the event loop.
"""
import logging
from abc import ABC, abstractmethod
from typing import Optional

import requests

from .config import DEFAULT_BLOCK_TAG, DEFAULT_TIMEOUT
from .exceptions import RemoteCallError, TransportError
from .models import RpcRequest, RpcResponse

# Configure logger
logger = logging.getLogger(__name__)


class RPCTransport(ABC):
    """
    Abstract base class for RPC transport implementations.

    A transport delivers one read call and returns the raw ``result`` value.
    It never retries.
    """

    @abstractmethod
    def call(self, endpoint_url: str, call_type: str, target: str, calldata: str) -> str:
        """
        Execute a call against an endpoint.

        Args:
            endpoint_url: URL of the JSON-RPC endpoint
            call_type: JSON-RPC method, e.g. ``eth_call``
            target: Contract address the call is sent to
            calldata: Encoded selector and arguments

        Returns:
            The raw ``result`` field of the response

        Raises:
            RemoteCallError: If the endpoint returns an error object
            TransportError: If the request fails or the reply is unreadable
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Close any open connections or resources."""
        pass


class HttpTransport(RPCTransport):
    """JSON-RPC over HTTP POST using a requests session."""

    def __init__(
        self,
        timeout: int = DEFAULT_TIMEOUT,
        block_tag: str = DEFAULT_BLOCK_TAG,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the HTTP transport.

        Args:
            timeout: Timeout for HTTP requests in seconds
            block_tag: Block parameter sent with every call
            session: Session to reuse (one is created if omitted)
        """
        self.timeout = timeout
        self.block_tag = block_tag
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    def call(self, endpoint_url: str, call_type: str, target: str, calldata: str) -> str:
        payload = RpcRequest.for_call(call_type, target, calldata, self.block_tag)
        logger.debug(f"POST {endpoint_url} {call_type} to={target} data={calldata}")

        try:
            response = self.session.post(endpoint_url, json=payload.model_dump(), timeout=self.timeout)
        except requests.Timeout as exc:
            raise TransportError(f"RPC request to {endpoint_url} timed out: {exc}") from exc
        except requests.RequestException as exc:
            raise TransportError(f"RPC request to {endpoint_url} failed: {exc}") from exc

        try:
            body = RpcResponse.model_validate(response.json())
        except ValueError as exc:
            body = None
            decode_error = exc

        # endpoints may report call errors with a non-2xx status
        if body is not None and body.error is not None:
            logger.debug(f"RPC call failed: to={target} data={calldata} error={body.error.message}")
            raise RemoteCallError(body.error.message, body.error.code)

        try:
            response.raise_for_status()
        except requests.HTTPError as exc:
            raise TransportError(f"RPC request to {endpoint_url} failed: {exc}") from exc

        if body is None:
            raise TransportError(f"Invalid JSON-RPC response from {endpoint_url}: {decode_error}") from decode_error

        if not isinstance(body.result, str):
            raise TransportError(f"Missing result in response from {endpoint_url}: {response.text[:200]}")
        return body.result

    def close(self) -> None:
        self.session.close()
