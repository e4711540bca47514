"""Decimal helpers for token amounts and USD values."""

from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Iterable, Optional

USD_QUANTUM = Decimal("0.000001")
ZERO = Decimal("0")


def parse_hex_quantity(value: Optional[str]) -> Optional[int]:
    """
    Parse a 0x-prefixed hex quantity into an int.

    Returns None when the value is missing, not 0x-prefixed, or not valid hex.
    """
    if not value or not value.startswith("0x"):
        return None
    digits = value[2:]
    if not digits:
        return 0
    try:
        return int(digits, 16)
    except ValueError:
        return None


def shift_decimals(raw_amount: int, decimals: int) -> Decimal:
    """Move the decimal point of a raw integer amount left by `decimals` places."""
    return Decimal(raw_amount).scaleb(-decimals)


def round_usd(value: Decimal) -> Decimal:
    """Round a USD amount to 6 fractional digits, half up."""
    return value.quantize(USD_QUANTUM, rounding=ROUND_HALF_UP)


def to_decimal(value: Optional[object], default: Decimal = ZERO) -> Decimal:
    """
    Convert an upstream numeric value to Decimal.

    None maps to `default`; anything unparsable raises ValueError.
    """
    if value is None:
        return default
    if isinstance(value, float):
        value = repr(value)
    try:
        result = Decimal(str(value))
    except InvalidOperation as e:
        raise ValueError(f"Not a decimal value: {value!r}") from e
    if not result.is_finite():
        raise ValueError(f"Not a finite decimal value: {value!r}")
    return result


def sum_decimals(values: Iterable[Optional[Decimal]]) -> Decimal:
    """Sum values, skipping None."""
    total = ZERO
    for value in values:
        if value is not None:
            total += value
    return total
