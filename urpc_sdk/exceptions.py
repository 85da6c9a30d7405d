"""
Exceptions for the urpc SDK.

Call-site errors (parsing, symbol lookup, encoding, remote and transport
failures, formatting) are scoped to a single call; document errors abort the
whole render.
"""
from typing import Optional


class URPCError(Exception):
    """Base exception for all urpc errors."""
    pass


class ParseError(URPCError):
    """Raised when a call string does not match the call grammar."""

    def __init__(self, message: str, text: Optional[str] = None):
        self.text = text
        super().__init__(message)


class UnknownSymbolError(URPCError):
    """Raised when a sigil reference has no entry in the directory."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown symbol: ${name}")


class EncodingError(URPCError):
    """Raised when calldata cannot be encoded."""
    pass


class EncodingOverflowError(EncodingError):
    """Raised when an argument does not fit in a 32-byte word."""
    pass


class RemoteCallError(URPCError):
    """Raised when the RPC endpoint answers with an error object."""

    def __init__(self, message: str, code: Optional[int] = None):
        self.code = code
        super().__init__(message)


class TransportError(URPCError):
    """Raised when the request could not be delivered or the reply is unreadable."""
    pass


class FormatError(URPCError):
    """Raised when a raw result cannot be formatted for display."""
    pass


class MalformedDocumentError(URPCError):
    """Raised when the document's structural blocks are missing or broken."""
    pass


class MissingEndpointError(MalformedDocumentError):
    """Raised when the document declares no RPC endpoint."""
    pass


# Errors that fail a single call site without aborting a batch render
CALL_SITE_ERRORS = (
    ParseError,
    UnknownSymbolError,
    EncodingError,
    RemoteCallError,
    TransportError,
    FormatError,
)
