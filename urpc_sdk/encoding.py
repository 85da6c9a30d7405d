"""
Calldata encoding.

Calldata is the 4-byte selector followed by one 32-byte word per argument.
Every argument is treated as an address-width value, so no ABI type
information is needed.
"""
import re
from typing import Sequence

from .exceptions import EncodingError, EncodingOverflowError

WORD_HEX_CHARS = 64
SELECTOR_HEX_CHARS = 10  # "0x" + 8 hex digits

_SELECTOR_RE = re.compile(r"^0x[0-9a-fA-F]{8}$")


def pad32(value: str) -> str:
    """
    Left-pad a value to one 32-byte word.

    A ``0x`` prefix is stripped first; other values are padded as raw text.

    Raises:
        EncodingOverflowError: If the value is wider than 32 bytes
    """
    digits = value[2:] if value.startswith("0x") else value
    if len(digits) > WORD_HEX_CHARS:
        raise EncodingOverflowError(
            f"Argument {value!r} is {len(digits)} characters, max is {WORD_HEX_CHARS}"
        )
    return digits.rjust(WORD_HEX_CHARS, "0")


def encode_call(selector: str, args: Sequence[str]) -> str:
    """
    Build calldata for a call.

    Args:
        selector: ``0x``-prefixed 4-byte selector
        args: Resolved argument values, in call order

    Returns:
        ``selector`` followed by each padded argument

    Raises:
        EncodingError: If the selector is not 4 bytes of hex
        EncodingOverflowError: If an argument is wider than 32 bytes
    """
    if not _SELECTOR_RE.match(selector):
        raise EncodingError(f"Invalid selector {selector!r}, expected 0x followed by 8 hex digits")
    return selector + "".join(pad32(arg) for arg in args)
