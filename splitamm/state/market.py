"""
Market value types: pool snapshots and market windows.

Both are frozen dataclasses. They exist only for the duration of a quote and
are never mutated; a trade produces a new snapshot (see
``splitamm.core.solvers.apply_pt_swap``).

Units/conventions:
- `n_pt` and `n_asset` are integer token units (`n_asset` is IB reserves in the
  AMM's asset units).
- `*_nano` values are fixed-point, scaled by 1e9.
- `*_unix_ts` values are Unix seconds.
"""

from __future__ import annotations

from dataclasses import dataclass


def _check_int(name: str, value: object) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


@dataclass(frozen=True)
class PoolSnapshot:
    """Reserves and curve parameters of an AMM at one point in time."""

    n_pt: int
    n_asset: int
    scalar_root_nano: int
    last_implied_rate_nano: int

    # Only needed for liquidity quotes.
    n_ib: int = 0
    lp_supply: int = 0

    def __post_init__(self) -> None:
        for name in ("n_pt", "n_asset", "scalar_root_nano", "last_implied_rate_nano", "n_ib", "lp_supply"):
            _check_int(name, getattr(self, name))
        for name in ("n_pt", "n_asset", "n_ib", "lp_supply"):
            v = getattr(self, name)
            if v < 0:
                raise ValueError(f"{name} must be non-negative: {v}")
        if self.scalar_root_nano <= 0:
            raise ValueError(f"scalar_root_nano must be positive: {self.scalar_root_nano}")
        if self.last_implied_rate_nano <= 0:
            raise ValueError(f"last_implied_rate_nano must be positive: {self.last_implied_rate_nano}")


@dataclass(frozen=True)
class MarketWindow:
    """Trading lifetime of a market, from start to maturity."""

    start_unix_ts: int
    end_unix_ts: int

    def __post_init__(self) -> None:
        _check_int("start_unix_ts", self.start_unix_ts)
        _check_int("end_unix_ts", self.end_unix_ts)
        if self.end_unix_ts < self.start_unix_ts:
            raise ValueError(
                f"end_unix_ts ({self.end_unix_ts}) must not precede start_unix_ts ({self.start_unix_ts})"
            )

    def is_matured(self, current_unix_ts: int) -> bool:
        return current_unix_ts >= self.end_unix_ts
