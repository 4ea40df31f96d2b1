"""
Lock-amount composer for split payments.

A customer pays a merchant in IB by locking IB, splitting it into PT + YT and
selling the PT side into the AMM. We search for the locked amount ``L`` such
that

    L - pt_to_ib(L * base_per_ib) == target_amount

``base_per_ib`` comes from the fixed external accrual curve
(``time_model.base_per_ib_nano``), not from pool state.

The residual ``f = L - sold - target`` grows with ``L``, so ``f > 0`` lowers the
upper bound and ``f < 0`` raises the lower bound. The search starts at
``[target_amount, n_pt / base_per_ib]``: more PT than the pool holds cannot be
sold.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..state.market import MarketWindow, PoolSnapshot
from .errors import RootNotFound
from .fixed_point import PRECISION, require_int
from .solvers import DEFAULT_SOLVER_CONFIG, SolverConfig, pt_to_ib

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LockQuote:
    required_lock_amount: int
    merchant_portion: int
    amm_sold_portion: int


def required_lock_amount(
    target_amount: int,
    current_unix_ts: int,
    window: MarketWindow,
    base_per_ib_nano: int,
    pool: PoolSnapshot,
    config: SolverConfig = DEFAULT_SOLVER_CONFIG,
) -> LockQuote:
    """Find the IB lock that leaves exactly ``target_amount`` for the merchant.

    Raises:
        ValueError: if ``target_amount`` or ``base_per_ib_nano`` is not positive.
        RootNotFound: if the bisection exhausts its budget or its bracket.
    """
    target_amount = require_int("target_amount", target_amount)
    base_per_ib_nano = require_int("base_per_ib_nano", base_per_ib_nano)
    if target_amount <= 0:
        raise ValueError(f"target_amount must be positive: {target_amount}")
    if base_per_ib_nano <= 0:
        raise ValueError(f"base_per_ib_nano must be positive: {base_per_ib_nano}")

    lower = target_amount
    upper = (pool.n_pt * PRECISION) // base_per_ib_nano

    iteration = 0
    while iteration < config.max_iterations and lower <= upper:
        iteration += 1
        candidate = (lower + upper) // 2
        pt_amount = (candidate * base_per_ib_nano) // PRECISION

        # Selling this much PT would empty the asset side of the curve.
        if pt_amount >= pool.n_asset:
            upper = candidate - 1
            continue

        sold = pt_to_ib(pool, window, current_unix_ts, pt_amount)
        f = candidate - sold - target_amount
        if abs(f) <= config.tolerance:
            logger.debug(
                "required_lock_amount converged: target=%d lock=%d sold=%d iterations=%d",
                target_amount,
                candidate,
                sold,
                iteration,
            )
            return LockQuote(
                required_lock_amount=candidate,
                merchant_portion=candidate - sold,
                amm_sold_portion=sold,
            )

        if f > 0:
            upper = candidate - 1
        else:
            lower = candidate + 1

    logger.debug(
        "required_lock_amount exhausted: target=%d bracket=[%d, %d] iterations=%d",
        target_amount,
        lower,
        upper,
        iteration,
    )
    raise RootNotFound("required lock amount", iteration)
