"""Time model: remaining and elapsed market time as fixed-point year fractions.

A year is exactly 365 days (``SECONDS_PER_YEAR``). This is not calendar
accurate; it matches the values the on-chain program stores and must not be
changed.
"""

from __future__ import annotations

from .fixed_point import PRECISION, pow_nano

SECONDS_PER_YEAR: int = 31_536_000
SECONDS_PER_DAY: int = 86_400

# External accrual assumption for IB: 1.2x per year, continuously compounded.
DEFAULT_ACCRUAL_BASE_NANO: int = 1_200_000_000


def time_to_expiry(end_unix_ts: int, current_unix_ts: int) -> int:
    """Seconds until ``end_unix_ts``, clamped at zero."""
    return max(end_unix_ts - current_unix_ts, 0)


def years_to_expiry_nano(end_unix_ts: int, current_unix_ts: int) -> int:
    """Remaining time as a fraction of a 365-day year, scaled by PRECISION.

    Zero at and after maturity.
    """
    return (time_to_expiry(end_unix_ts, current_unix_ts) * PRECISION) // SECONDS_PER_YEAR


def years_elapsed_nano(start_unix_ts: int, current_unix_ts: int) -> int:
    """Elapsed time since market start, scaled by PRECISION. Zero before start."""
    return (max(current_unix_ts - start_unix_ts, 0) * PRECISION) // SECONDS_PER_YEAR


def base_per_ib_nano(
    start_unix_ts: int,
    current_unix_ts: int,
    accrual_base_nano: int = DEFAULT_ACCRUAL_BASE_NANO,
) -> int:
    """Base units accrued per IB unit since market start.

    ``accrual_base ** years_elapsed``. This curve is a fixed assumption and is
    not derived from pool state.
    """
    return pow_nano(accrual_base_nano, years_elapsed_nano(start_unix_ts, current_unix_ts))


def days_to_maturity(end_unix_ts: int, current_unix_ts: int) -> int:
    """Whole days left until maturity, rounded up, never negative."""
    remaining = time_to_expiry(end_unix_ts, current_unix_ts)
    return -(-remaining // SECONDS_PER_DAY)
