"""
Numeric Coercion

Helpers for turning loosely-typed JSON values (numbers, numeric strings,
nulls) into finite Decimals. Anything that is not a finite number is
reported as absent so that callers can apply their own default.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

TWO_PLACES = Decimal("0.01")

# Larger magnitudes are treated as absent so that products of two
# coerced values still round to cents within the default context.
MAX_MAGNITUDE = Decimal(10**12)


def to_decimal(value: Any) -> Decimal | None:
    """
    Convert a JSON-ish value to a finite Decimal.

    Returns None for None, booleans, blank or non-numeric strings,
    NaN/Infinity, magnitudes of MAX_MAGNITUDE or more and any
    other type.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float)):
        # str() keeps floats at their shortest repr (0.1 -> "0.1")
        result = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            result = Decimal(text)
        except InvalidOperation:
            return None
    else:
        return None

    if not result.is_finite() or abs(result) >= MAX_MAGNITUDE:
        return None
    return result


def decimal_or(value: Any, default: Decimal) -> Decimal:
    """Coerce ``value`` to Decimal, falling back to ``default``."""
    result = to_decimal(value)
    return default if result is None else result


def to_int(value: Any) -> int | None:
    """Coerce an integral numeric value (``7``, ``"7"``, ``7.0``) to int."""
    result = to_decimal(value)
    if result is None or result != result.to_integral_value():
        return None
    return int(result)


def round_money(value: Decimal) -> Decimal:
    """Round to cents, half away from zero."""
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
