"""
urpc SDK - inline read-only RPC calls for text documents.
"""
from .version import __version__
from .cache import ResponseCache, cache_key
from .client import URPCClient
from .config import URPCConfig
from .directory import SymbolDirectory
from .document import Block, BlockKind, tokenize
from .encoding import encode_call, pad32
from .exceptions import (
    URPCError, ParseError, UnknownSymbolError, EncodingError, EncodingOverflowError,
    RemoteCallError, TransportError, FormatError, MalformedDocumentError, MissingEndpointError
)
from .formatting import format_result
from .models import CallDescriptor, ResolvedCall, CallResult, RenderResult
from .parser import parse_call_string
from .renderer import DocumentRenderer, render_document
from .stub_transport import StubTransport
from .transport import RPCTransport, HttpTransport
from .views import ResultView, PlainView, InspectorView

__all__ = [
    "__version__",
    "URPCClient",
    "URPCConfig",
    "ResponseCache",
    "cache_key",
    "SymbolDirectory",
    "Block",
    "BlockKind",
    "tokenize",
    "encode_call",
    "pad32",
    "format_result",
    "parse_call_string",
    "CallDescriptor",
    "ResolvedCall",
    "CallResult",
    "RenderResult",
    "DocumentRenderer",
    "render_document",
    "RPCTransport",
    "HttpTransport",
    "StubTransport",
    "ResultView",
    "PlainView",
    "InspectorView",
    "URPCError",
    "ParseError",
    "UnknownSymbolError",
    "EncodingError",
    "EncodingOverflowError",
    "RemoteCallError",
    "TransportError",
    "FormatError",
    "MalformedDocumentError",
    "MissingEndpointError",
]
