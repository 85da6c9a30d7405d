"""
Display formatting for raw call results.
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Optional, Union

from .exceptions import FormatError

LARGE_VALUE_THRESHOLD = Decimal(9999)
UNIT = Decimal(1)

_TWO_PLACES = Decimal("0.01")
_FIVE_PLACES = Decimal("0.00001")

# enough digits for any uint256
_PRECISION = 100

# decimals() is a uint8 on token contracts
MAX_DECIMALS = 255


def parse_decimals(value: Union[str, int, None]) -> Optional[int]:
    """
    Turn a resolved decimals field into an int.

    None stays None ("no scaling"); anything else must be an integer from 0
    to MAX_DECIMALS.
    """
    if value is None:
        return None
    try:
        decimals = int(value)
    except (TypeError, ValueError):
        raise FormatError(f"Invalid decimals: {value!r}") from None
    if not 0 <= decimals <= MAX_DECIMALS:
        raise FormatError(f"Invalid decimals: {value!r}")
    return decimals


def _hex_to_int(hex_value: str) -> int:
    digits = hex_value[2:] if hex_value.lower().startswith("0x") else hex_value
    if not digits:
        return 0
    try:
        return int(digits, 16)
    except ValueError:
        raise FormatError(f"Result is not hex: {hex_value!r}") from None


def _plain(number: Decimal) -> str:
    # drop trailing zeros without switching to exponent notation
    text = format(number, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_result(hex_value: str, decimals: Optional[int] = None) -> str:
    """
    Format a raw hex result for display.

    Without decimals the value is returned unchanged. With decimals it is
    scaled by 10**decimals and shown as:

    - above 9999: rounded to an integer with thousands separators
    - above 1 up to 9999: rounded to 2 places
    - 0 up to 1: rounded to 5 places

    Args:
        hex_value: Raw ``0x`` result from the endpoint
        decimals: Number of decimals to scale by, or None

    Returns:
        Display string

    Raises:
        FormatError: If the value is not hex or decimals is invalid
    """
    if decimals is None:
        return hex_value

    decimals = parse_decimals(decimals)
    raw = _hex_to_int(hex_value)

    try:
        with localcontext() as ctx:
            # precision sized to the result, which may span several words
            ctx.prec = max(_PRECISION, raw.bit_length() * 30103 // 100000 + 12)
            number = Decimal(raw).scaleb(-decimals)
            if number > LARGE_VALUE_THRESHOLD:
                return f"{int(number.quantize(UNIT, rounding=ROUND_HALF_UP)):,}"
            if number > UNIT:
                return _plain(number.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))
            return _plain(number.quantize(_FIVE_PLACES, rounding=ROUND_HALF_UP))
    except (InvalidOperation, ValueError) as exc:
        raise FormatError(f"Cannot format result {hex_value[:66]!r} with {decimals} decimals") from exc
