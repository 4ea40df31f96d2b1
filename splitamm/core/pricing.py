"""
Logit pricing curve and rate-anchor calibration.

The marginal PT-per-IB exchange rate at a post-trade PT proportion ``p`` is:

    rate = ln(p / (1 - p)) / rate_scalar + rate_anchor

- ``rate_scalar = scalar_root / years_to_expiry`` steepens the curve as
  maturity approaches.
- ``rate_anchor`` is recalibrated before each trade so that the curve, evaluated
  at the *current* proportion, reproduces the pool's last implied rate
  compounded over the remaining time (``last_implied_rate ** years``). This keeps
  the rate continuous as time passes between trades.

At and after maturity the curve collapses to the 1:1 boundary: the anchor and
the exchange rate are both exactly ``PRECISION``.
"""

from __future__ import annotations

from ..state.market import MarketWindow, PoolSnapshot
from .errors import DegenerateAnchor, NegativeExchangeRate
from .fixed_point import PRECISION, div_trunc, ln_odds_nano, pow_nano
from .time_model import years_to_expiry_nano


def proportion_nano(n_pt: int, n_asset: int) -> int:
    """PT share of total reserves, floored. Exactly 0.5 for an empty pool."""
    denominator = n_pt + n_asset
    if denominator == 0:
        return PRECISION // 2
    return (n_pt * PRECISION) // denominator


def rate_scalar_nano(scalar_root_nano: int, end_unix_ts: int, current_unix_ts: int) -> int:
    """Curve steepness: ``scalar_root / years_to_expiry``. Undefined at maturity."""
    years = years_to_expiry_nano(end_unix_ts, current_unix_ts)
    if years == 0:
        raise ValueError("rate scalar is undefined at or after maturity")
    return (scalar_root_nano * PRECISION) // years


def update_rate_anchor(
    n_pt: int,
    n_asset: int,
    scalar_root_nano: int,
    last_implied_rate_nano: int,
    end_unix_ts: int,
    current_unix_ts: int,
) -> int:
    """Recentre the curve on the last implied rate at the current proportion.

    Steps:
        p = proportion(n_pt, n_asset)
        ln_term = ln(p / (1 - p))
        target = last_implied_rate ** years_to_expiry
        anchor = target - ln_term / rate_scalar

    Raises:
        InvalidProportion: if the current proportion is 0 or 1.
        DegenerateAnchor: if the anchor is not positive.
    """
    years = years_to_expiry_nano(end_unix_ts, current_unix_ts)
    if years == 0:
        return PRECISION

    p = proportion_nano(n_pt, n_asset)
    ln_term = ln_odds_nano(p)
    rate_scalar = rate_scalar_nano(scalar_root_nano, end_unix_ts, current_unix_ts)
    exchange_rate_target = pow_nano(last_implied_rate_nano, years)

    rate_anchor = exchange_rate_target - div_trunc(ln_term * PRECISION, rate_scalar)
    if rate_anchor <= 0:
        raise DegenerateAnchor(rate_anchor)
    return rate_anchor


def exchange_rate_nano(p_nano: int, rate_scalar: int, rate_anchor: int) -> int:
    """Marginal PT-per-IB rate at proportion ``p_nano``.

    Raises:
        InvalidProportion: unless ``0 < p_nano < PRECISION``.
        NegativeExchangeRate: if the resulting rate is not positive.
    """
    ln_term = ln_odds_nano(p_nano)
    rate = div_trunc(PRECISION * ln_term, rate_scalar) + rate_anchor
    if rate <= 0:
        raise NegativeExchangeRate(rate)
    return rate


def trade_exchange_rate_nano(
    pool: PoolSnapshot,
    window: MarketWindow,
    current_unix_ts: int,
    d_pt: int,
) -> int:
    """Exchange rate for a trade moving ``d_pt`` PT into the pool.

    The anchor comes from the pre-trade reserves; the rate is read at the
    post-trade proportion.
    """
    if years_to_expiry_nano(window.end_unix_ts, current_unix_ts) == 0:
        return PRECISION

    rate_anchor = update_rate_anchor(
        pool.n_pt,
        pool.n_asset,
        pool.scalar_root_nano,
        pool.last_implied_rate_nano,
        window.end_unix_ts,
        current_unix_ts,
    )
    p_trade = proportion_nano(pool.n_pt + d_pt, pool.n_asset - d_pt)
    rate_scalar = rate_scalar_nano(pool.scalar_root_nano, window.end_unix_ts, current_unix_ts)
    return exchange_rate_nano(p_trade, rate_scalar, rate_anchor)


def implied_rate_nano(exchange_rate: int, years_nano: int) -> int:
    """Annualized rate embedded in an exchange rate: ``rate ** (1 / years)``."""
    if years_nano <= 0:
        raise ValueError("implied rate is undefined at or after maturity")
    return pow_nano(exchange_rate, (PRECISION * PRECISION) // years_nano)
