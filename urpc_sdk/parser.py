"""
Parser for inline call strings.

A call string has the shape::

    <to>.<methodName>(<arg0>,<arg1>,...)[.<decimals>]

e.g. ``$stETH.balanceOf($unstETH).18``. Fields may be literals or ``$``
references; references are left untouched here and resolved later against a
SymbolDirectory.
"""
import logging
from typing import List, Optional

from .exceptions import ParseError
from .models import CallDescriptor

logger = logging.getLogger(__name__)


def _field(value: str, name: str, text: str) -> str:
    value = value.strip()
    if not value:
        raise ParseError(f"Empty {name} in call string: {text!r}", text)
    if any(ch.isspace() for ch in value):
        raise ParseError(f"Whitespace inside {name} in call string: {text!r}", text)
    return value


def _split_args(args_text: str, text: str) -> List[str]:
    if not args_text.strip():
        return []
    return [_field(arg, "argument", text) for arg in args_text.split(",")]


def parse_call_string(text: str, key: Optional[str] = None) -> CallDescriptor:
    """
    Segment a call string into a CallDescriptor.

    Args:
        text: The call string as written in the document
        key: Optional stable key carried by the call block

    Returns:
        CallDescriptor with unresolved fields

    Raises:
        ParseError: If the string does not match the call grammar
    """
    raw = text.strip()
    if not raw:
        raise ParseError("Empty call string", text)

    if raw.count("(") != 1 or raw.count(")") != 1:
        raise ParseError(f"Unbalanced parentheses in call string: {raw!r}", raw)
    open_idx = raw.index("(")
    close_idx = raw.index(")")
    if close_idx < open_idx:
        raise ParseError(f"Unbalanced parentheses in call string: {raw!r}", raw)

    head = raw[:open_idx]
    to, sep, method = head.partition(".")
    if not sep:
        raise ParseError(f"Missing '.' between target and method: {raw!r}", raw)
    to = _field(to, "target", raw)
    method = _field(method, "method", raw)
    if "." in method:
        raise ParseError(f"Unexpected '.' in method name: {raw!r}", raw)

    args = _split_args(raw[open_idx + 1:close_idx], raw)

    decimals = None
    tail = raw[close_idx + 1:]
    if tail:
        if not tail.startswith("."):
            raise ParseError(f"Unexpected text after arguments: {tail!r}", raw)
        # `.` with nothing after it means no scaling
        decimals = tail[1:].strip() or None
        if decimals is not None:
            decimals = _field(decimals, "decimals", raw)
            if "." in decimals:
                raise ParseError(f"Unexpected '.' in decimals: {raw!r}", raw)

    descriptor = CallDescriptor(raw_text=raw, to=to, method=method, args=args, decimals=decimals, key=key)
    logger.debug(f"Parsed call string {raw!r} -> {descriptor.method_signature}")
    return descriptor
