"""
URPCClient - executes inline calls against a JSON-RPC endpoint.
"""
import asyncio
import logging
from typing import Optional

from ._rate_limited_log import rate_limited_log
from .cache import CacheKey, ResponseCache, cache_key
from .config import URPCConfig
from .directory import SymbolDirectory
from .encoding import encode_call
from .exceptions import CALL_SITE_ERRORS
from .formatting import format_result, parse_decimals
from .models import CallDescriptor, ResolvedCall
from .parser import parse_call_string
from .transport import HttpTransport, RPCTransport


class URPCClient:
    """
    Client for executing inline read calls.

    This client handles:
    1. Resolving a parsed call against a symbol directory
    2. Encoding calldata and sending it through a transport
    3. Memoizing results in a response cache
    4. Formatting raw results for display

    The cache belongs to the client, so every render sharing a client shares
    its results. Pass an explicit ``cache`` to share one across clients.
    """

    def __init__(
        self,
        endpoint_url: Optional[str] = None,
        *,
        transport: Optional[RPCTransport] = None,
        cache: Optional[ResponseCache] = None,
        config: Optional[URPCConfig] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the URPCClient

        Args:
            endpoint_url: Default JSON-RPC endpoint (e.g., "https://eth.llamarpc.com")
            transport: Transport to send calls through (HTTP if omitted)
            cache: Response cache (a new one per client if omitted)
            config: Client settings (defaults if omitted)
            logger: Optional logger instance to use for debug/info logging
        """
        self.config = config or URPCConfig()
        self.endpoint_url = endpoint_url
        self.transport = transport or HttpTransport(
            timeout=self.config.timeout,
            block_tag=self.config.block_tag
        )
        self.cache = cache if cache is not None else ResponseCache(self.config.cache_maxsize)
        self.logger = logger or logging.getLogger(__name__)

    def __enter__(self) -> "URPCClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self.transport.close()

    def _endpoint(self, endpoint_url: Optional[str]) -> str:
        url = endpoint_url or self.endpoint_url
        if not url:
            raise ValueError("No endpoint_url given and no default configured")
        return url

    def resolve(
        self,
        descriptor: CallDescriptor,
        directory: SymbolDirectory,
        call_type: Optional[str] = None
    ) -> ResolvedCall:
        """
        Resolve every field of a descriptor through the directory.

        Args:
            descriptor: Parsed call
            directory: Directory used to resolve references
            call_type: JSON-RPC method for this call (the config's if omitted)

        Raises:
            UnknownSymbolError: If a reference or the method signature is missing
            FormatError: If decimals does not resolve to a valid integer
        """
        return ResolvedCall(
            to=directory.resolve(descriptor.to),
            selector=directory.resolve_selector(descriptor.method_name, descriptor.method_signature),
            method_signature=descriptor.method_signature,
            args=[directory.resolve(arg) for arg in descriptor.args],
            decimals=parse_decimals(directory.resolve_optional(descriptor.decimals)),
            call_type=call_type or self.config.call_type,
        )

    def _key(self, resolved: ResolvedCall) -> CacheKey:
        return cache_key(resolved.call_type, resolved.to, resolved.method_signature, resolved.args)

    def _send(self, endpoint_url: str, resolved: ResolvedCall, calldata: str) -> str:
        return self.transport.call(endpoint_url, resolved.call_type, resolved.to, calldata)

    def execute(self, resolved: ResolvedCall, endpoint_url: Optional[str] = None) -> str:
        """
        Execute a resolved call, using the cache.

        Returns:
            Raw hex result

        Raises:
            EncodingError: If the calldata cannot be encoded
            RemoteCallError: If the endpoint returns an error
            TransportError: If the request fails
        """
        url = self._endpoint(endpoint_url)
        calldata = encode_call(resolved.selector, resolved.args)
        return self.cache.get_or_call(self._key(resolved), lambda: self._send(url, resolved, calldata))

    async def aexecute(self, resolved: ResolvedCall, endpoint_url: Optional[str] = None) -> str:
        """
        Async variant of execute().

        The blocking request runs in a worker thread. Concurrent calls with the
        same cache key share a single request.
        """
        url = self._endpoint(endpoint_url)
        calldata = encode_call(resolved.selector, resolved.args)
        return await self.cache.get_or_fetch(
            self._key(resolved),
            lambda: asyncio.to_thread(self._send, url, resolved, calldata)
        )

    def call_resolved(self, resolved: ResolvedCall, endpoint_url: Optional[str] = None) -> str:
        """
        Execute and format a resolved call.

        Returns:
            The display string, or the configured error marker if the call failed
        """
        try:
            return format_result(self.execute(resolved, endpoint_url), resolved.decimals)
        except CALL_SITE_ERRORS as e:
            rate_limited_log(f"RPC call to {resolved.to} {resolved.method_signature} failed: {e}",
                             logger_instance=self.logger)
            return self.config.error_marker

    def call(self, call_string: str, directory: SymbolDirectory, endpoint_url: Optional[str] = None) -> str:
        """
        Parse, resolve, execute and format a single call string.

        Args:
            call_string: e.g. "$stETH.balanceOf($unstETH).18"
            directory: Directory used to resolve references
            endpoint_url: Endpoint to call (defaults to the client's)

        Returns:
            The display string, or the configured error marker if the call failed
        """
        try:
            descriptor = parse_call_string(call_string)
            resolved = self.resolve(descriptor, directory)
        except CALL_SITE_ERRORS as e:
            rate_limited_log(f"RPC call {call_string.strip()!r} failed: {e}", logger_instance=self.logger)
            return self.config.error_marker
        return self.call_resolved(resolved, endpoint_url)
