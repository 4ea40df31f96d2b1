"""
Liquidity quotes: proportional add/remove against PT and IB reserves.

These quotes do not touch the pricing curve. LP tokens are a pro-rata claim
on the `n_pt` and `n_ib` reserves:

    remove:  pt_out = lp * n_pt / lp_supply,  ib_out = lp * n_ib / lp_supply
    add:     counter = amount * other / same,  lp = amount * lp_supply / same

All divisions floor.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..state.market import PoolSnapshot
from .fixed_point import require_int


@dataclass(frozen=True)
class LiquidityQuote:
    pt_amount: int
    ib_amount: int
    lp_amount: int


def _require_liquid(pool: PoolSnapshot) -> None:
    if pool.n_pt <= 0 or pool.n_ib <= 0 or pool.lp_supply <= 0:
        raise ValueError(
            f"pool has no liquidity: n_pt={pool.n_pt} n_ib={pool.n_ib} lp_supply={pool.lp_supply}"
        )


def _require_non_negative(name: str, value: int) -> int:
    value = require_int(name, value)
    if value < 0:
        raise ValueError(f"{name} must be non-negative: {value}")
    return value


def quote_remove_liquidity(pool: PoolSnapshot, lp_amount: int) -> LiquidityQuote:
    """PT and IB returned for burning ``lp_amount`` LP tokens."""
    lp_amount = _require_non_negative("lp_amount", lp_amount)
    _require_liquid(pool)
    if lp_amount > pool.lp_supply:
        raise ValueError(f"lp_amount exceeds lp_supply: {lp_amount} > {pool.lp_supply}")
    return LiquidityQuote(
        pt_amount=(lp_amount * pool.n_pt) // pool.lp_supply,
        ib_amount=(lp_amount * pool.n_ib) // pool.lp_supply,
        lp_amount=lp_amount,
    )


def quote_add_liquidity_from_pt(pool: PoolSnapshot, pt_amount: int) -> LiquidityQuote:
    """IB required alongside ``pt_amount`` PT, and the LP minted."""
    pt_amount = _require_non_negative("pt_amount", pt_amount)
    _require_liquid(pool)
    return LiquidityQuote(
        pt_amount=pt_amount,
        ib_amount=(pt_amount * pool.n_ib) // pool.n_pt,
        lp_amount=(pt_amount * pool.lp_supply) // pool.n_pt,
    )


def quote_add_liquidity_from_ib(pool: PoolSnapshot, ib_amount: int) -> LiquidityQuote:
    """PT required alongside ``ib_amount`` IB, and the LP minted."""
    ib_amount = _require_non_negative("ib_amount", ib_amount)
    _require_liquid(pool)
    return LiquidityQuote(
        pt_amount=(ib_amount * pool.n_pt) // pool.n_ib,
        ib_amount=ib_amount,
        lp_amount=(ib_amount * pool.lp_supply) // pool.n_ib,
    )
