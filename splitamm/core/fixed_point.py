"""Fixed-point helpers shared by the pricing kernels.

All amounts, rates and time fractions are plain Python ints scaled by
``PRECISION`` (1e9). Rounding is explicit:

- ``//`` floors toward -inf and is used wherever the quote rounds down
  (amount outputs, proportions).
- ``div_trunc`` truncates toward zero and is used for signed curve terms,
  matching integer division in the on-chain program.

The logarithm and power steps are irreducibly floating point. They are kept in
this module so a table-driven or polynomial fixed-point version can replace
them without touching the curve code.
"""

from __future__ import annotations

import math

from .errors import InvalidProportion

PRECISION: int = 1_000_000_000  # 1e9


def require_int(name: str, value: object) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    return int(value)


def div_trunc(numerator: int, denominator: int) -> int:
    """Integer division rounding toward zero."""
    if denominator == 0:
        raise ZeroDivisionError("division by zero")
    q = abs(numerator) // abs(denominator)
    return q if (numerator >= 0) == (denominator > 0) else -q


def ln_odds_nano(proportion_nano: int) -> int:
    """``ln(p / (1 - p))`` scaled by PRECISION, truncated toward zero.

    The proportion must lie strictly inside (0, PRECISION); anything else is
    rejected before the logarithm is taken.
    """
    if proportion_nano <= 0 or proportion_nano >= PRECISION:
        raise InvalidProportion(proportion_nano)
    return int(math.log(proportion_nano / (PRECISION - proportion_nano)) * PRECISION)


def pow_nano(base_nano: int, exponent_nano: int) -> int:
    """``base ** exponent`` for fixed-point operands, truncated toward zero."""
    if base_nano <= 0:
        raise ValueError(f"base must be positive: {base_nano}")
    try:
        value = math.pow(base_nano / PRECISION, exponent_nano / PRECISION)
    except OverflowError as exc:
        raise ValueError(f"power out of range: {base_nano} ** {exponent_nano}") from exc
    if not math.isfinite(value):
        raise ValueError(f"power out of range: {base_nano} ** {exponent_nano}")
    return int(value * PRECISION)
