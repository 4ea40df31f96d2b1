"""
Trade solvers: PT -> IB in closed form, IB -> PT by bisection.

PT -> IB:
    d_ib = floor(d_pt * PRECISION / rate(d_pt))

IB -> PT has no closed form because the PT amount is itself an input to the
post-trade proportion the rate is read at. We bisect over ``d_pt`` in
``[0, n_asset - 1]`` on the residual

    f(d_pt) = rate(d_pt) - d_pt * PRECISION / d_ib

which is assumed monotonically decreasing in ``d_pt``. The sign test is done
in exact integers (``rate * d_ib <= d_pt * PRECISION``), which is the same
condition as ``pt_to_ib(d_pt) >= d_ib``. The search keeps narrowing until the
bracket is empty and returns the smallest ``d_pt`` with ``f <= 0``, so
``ib_to_pt(pt_to_ib(x))`` never exceeds ``x`` and lands on the first PT amount
that pays out the same IB.

The result is accepted when ``|rate - floor(d_pt * PRECISION / d_ib)|`` is
within ``tolerance * max(1, PRECISION // d_ib)``: one unit of ``d_pt`` moves
the trade-implied rate by ``PRECISION / d_ib``, so that is the finest residual
an integer ``d_pt`` can reach. The search is capped at ``max_iterations`` rate
evaluations and never returns an unconverged candidate.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from ..state.market import MarketWindow, PoolSnapshot
from .errors import RootNotFound
from .fixed_point import PRECISION, require_int
from .pricing import (
    exchange_rate_nano,
    implied_rate_nano,
    proportion_nano,
    rate_scalar_nano,
    trade_exchange_rate_nano,
    update_rate_anchor,
)
from .time_model import years_to_expiry_nano

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SolverConfig:
    """Bisection parameters shared by the IB -> PT and lock-amount searches."""

    tolerance: int = 1
    max_iterations: int = 100

    def __post_init__(self) -> None:
        for name in ("tolerance", "max_iterations"):
            v = getattr(self, name)
            if not isinstance(v, int) or isinstance(v, bool):
                raise TypeError(f"{name} must be an int")
        if self.tolerance < 0:
            raise ValueError(f"tolerance must be non-negative: {self.tolerance}")
        if self.max_iterations <= 0:
            raise ValueError(f"max_iterations must be positive: {self.max_iterations}")


DEFAULT_SOLVER_CONFIG = SolverConfig()


@dataclass(frozen=True)
class SwapQuote:
    """A PT -> IB quote together with the snapshot the trade would leave behind."""

    d_pt: int
    d_ib: int
    exchange_rate_nano: int
    pool_after: PoolSnapshot


def pt_to_ib(pool: PoolSnapshot, window: MarketWindow, current_unix_ts: int, delta_pt: int) -> int:
    """IB paid out for ``delta_pt`` PT sold into the pool (negative buys PT)."""
    delta_pt = require_int("delta_pt", delta_pt)
    rate = trade_exchange_rate_nano(pool, window, current_unix_ts, delta_pt)
    return (delta_pt * PRECISION) // rate


def ib_to_pt(
    pool: PoolSnapshot,
    window: MarketWindow,
    current_unix_ts: int,
    d_ib: int,
    config: SolverConfig = DEFAULT_SOLVER_CONFIG,
) -> int:
    """Smallest PT amount whose sale into the pool pays out at least ``d_ib`` IB.

    Raises:
        ValueError: if ``d_ib`` is not positive.
        RootNotFound: if the bisection exhausts its budget or its bracket.
    """
    d_ib = require_int("d_ib", d_ib)
    if d_ib <= 0:
        raise ValueError(f"d_ib must be positive: {d_ib}")

    if years_to_expiry_nano(window.end_unix_ts, current_unix_ts) == 0:
        # 1:1 boundary; the trade must still leave asset reserves behind.
        if d_ib >= pool.n_asset:
            raise RootNotFound("d_pt", 0)
        return d_ib

    # The anchor only depends on pre-trade state; compute it once.
    rate_anchor = update_rate_anchor(
        pool.n_pt,
        pool.n_asset,
        pool.scalar_root_nano,
        pool.last_implied_rate_nano,
        window.end_unix_ts,
        current_unix_ts,
    )
    rate_scalar = rate_scalar_nano(pool.scalar_root_nano, window.end_unix_ts, current_unix_ts)

    resolution = config.tolerance * max(1, PRECISION // d_ib)
    # The trade must leave at least one unit of asset reserves behind.
    lower = 0
    upper = pool.n_asset - 1
    best = None

    iteration = 0
    while iteration < config.max_iterations and lower <= upper:
        iteration += 1
        d_pt = (lower + upper) // 2

        p_trade = proportion_nano(pool.n_pt + d_pt, pool.n_asset - d_pt)
        rate = exchange_rate_nano(p_trade, rate_scalar, rate_anchor)

        if rate * d_ib <= d_pt * PRECISION:
            best = (d_pt, rate)
            upper = d_pt - 1
        else:
            lower = d_pt + 1

    if lower <= upper:
        logger.debug("ib_to_pt exhausted: d_ib=%d bracket=[%d, %d] iterations=%d", d_ib, lower, upper, iteration)
        raise RootNotFound("d_pt", iteration)
    if best is None:
        logger.debug("ib_to_pt infeasible: d_ib=%d n_asset=%d iterations=%d", d_ib, pool.n_asset, iteration)
        raise RootNotFound("d_pt", iteration)

    d_pt, rate = best
    f = rate - (d_pt * PRECISION) // d_ib
    if abs(f) > resolution:
        # Only reachable when the residual is not monotone over the bracket.
        logger.debug("ib_to_pt residual out of tolerance: d_ib=%d d_pt=%d f=%d", d_ib, d_pt, f)
        raise RootNotFound("d_pt", iteration)

    logger.debug("ib_to_pt converged: d_ib=%d d_pt=%d iterations=%d", d_ib, d_pt, iteration)
    return d_pt


def apply_pt_swap(
    pool: PoolSnapshot,
    window: MarketWindow,
    current_unix_ts: int,
    delta_pt: int,
) -> SwapQuote:
    """Quote a PT -> IB trade and derive the post-trade snapshot.

    Curve reserves move by ``delta_pt`` and the last implied rate is replaced by
    the rate implied by this trade's exchange rate. Liquidity fields (`n_ib`,
    `lp_supply`) are carried over unchanged. At maturity the last implied rate
    is kept as is.
    """
    delta_pt = require_int("delta_pt", delta_pt)
    rate = trade_exchange_rate_nano(pool, window, current_unix_ts, delta_pt)
    d_ib = (delta_pt * PRECISION) // rate

    years = years_to_expiry_nano(window.end_unix_ts, current_unix_ts)
    last_implied = implied_rate_nano(rate, years) if years > 0 else pool.last_implied_rate_nano
    pool_after = replace(
        pool,
        n_pt=pool.n_pt + delta_pt,
        n_asset=pool.n_asset - delta_pt,
        last_implied_rate_nano=last_implied,
    )
    return SwapQuote(d_pt=delta_pt, d_ib=d_ib, exchange_rate_nano=rate, pool_after=pool_after)
