"""
Quote engine: an imperative-shell wrapper around the pricing core.

The core raises on every failure. Callers at a service or CLI boundary usually
want a result object instead, so each method here returns a `QuoteResult`:
- `ok=True` with a plain-dict `value` on success,
- `ok=False` with `error` and a stable `code` on rejection.

Nothing is retried. Wall-clock time is always passed in by the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from ..core.errors import PricingError
from ..core.liquidity import (
    LiquidityQuote,
    quote_add_liquidity_from_ib,
    quote_add_liquidity_from_pt,
    quote_remove_liquidity,
)
from ..core.lock import required_lock_amount
from ..core.pricing import proportion_nano, trade_exchange_rate_nano
from ..core.solvers import ib_to_pt, pt_to_ib
from ..core.split import merchant_transfer_amount, quote_mint_pyt, quote_redeem_pyt
from ..core.time_model import base_per_ib_nano, days_to_maturity, years_to_expiry_nano
from ..state.market import MarketWindow, PoolSnapshot
from .config import QuoteConfig, UnknownMarket

logger = logging.getLogger(__name__)

CODE_INVALID_INPUT = "INVALID_INPUT"
CODE_UNKNOWN_MARKET = "UNKNOWN_MARKET"


@dataclass(frozen=True)
class QuoteResult:
    ok: bool
    value: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    code: Optional[str] = None


class QuoteEngine:
    def __init__(self, config: Optional[QuoteConfig] = None) -> None:
        self.config = config if config is not None else QuoteConfig()

    def _run(self, op: str, fn: Callable[[], Dict[str, Any]]) -> QuoteResult:
        try:
            value = fn()
        except PricingError as exc:
            logger.warning("%s rejected (%s): %s", op, exc.code, exc)
            return QuoteResult(ok=False, error=str(exc), code=exc.code)
        except UnknownMarket as exc:
            logger.warning("%s rejected (%s): %s", op, CODE_UNKNOWN_MARKET, exc)
            return QuoteResult(ok=False, error=str(exc), code=CODE_UNKNOWN_MARKET)
        except (TypeError, ValueError) as exc:
            logger.warning("%s rejected (%s): %s", op, CODE_INVALID_INPUT, exc)
            return QuoteResult(ok=False, error=str(exc), code=CODE_INVALID_INPUT)
        return QuoteResult(ok=True, value=value)

    def _base_per_ib(self, window: MarketWindow, now: int) -> int:
        return base_per_ib_nano(window.start_unix_ts, now, self.config.accrual_base_nano)

    def quote_market(self, pool: PoolSnapshot, window: MarketWindow, now: int) -> QuoteResult:
        """Current market observables: time to maturity, proportion, marginal rate."""

        def run() -> Dict[str, Any]:
            return {
                "years_to_expiry_nano": years_to_expiry_nano(window.end_unix_ts, now),
                "days_to_maturity": days_to_maturity(window.end_unix_ts, now),
                "proportion_nano": proportion_nano(pool.n_pt, pool.n_asset),
                "exchange_rate_nano": trade_exchange_rate_nano(pool, window, now, 0),
                "base_per_ib_nano": self._base_per_ib(window, now),
            }

        return self._run("quote_market", run)

    def quote_pt_to_ib(self, pool: PoolSnapshot, window: MarketWindow, now: int, delta_pt: int) -> QuoteResult:
        return self._run(
            "pt_to_ib",
            lambda: {"d_pt": delta_pt, "d_ib": pt_to_ib(pool, window, now, delta_pt)},
        )

    def quote_ib_to_pt(self, pool: PoolSnapshot, window: MarketWindow, now: int, d_ib: int) -> QuoteResult:
        return self._run(
            "ib_to_pt",
            lambda: {"d_ib": d_ib, "d_pt": ib_to_pt(pool, window, now, d_ib, self.config.solver_config())},
        )

    def quote_lock(self, pool: PoolSnapshot, window: MarketWindow, now: int, target_amount: int) -> QuoteResult:
        """IB a customer must lock so that ``target_amount`` remains after selling PT."""

        def run() -> Dict[str, Any]:
            base = self._base_per_ib(window, now)
            quote = required_lock_amount(
                target_amount,
                now,
                window,
                base,
                pool,
                self.config.lock_solver_config(),
            )
            return {
                "target_amount": target_amount,
                "required_lock_amount": quote.required_lock_amount,
                "merchant_portion": quote.merchant_portion,
                "amm_sold_portion": quote.amm_sold_portion,
                "base_per_ib_nano": base,
                "end_unix_ts": window.end_unix_ts,
            }

        return self._run("required_lock_amount", run)

    def quote_payment(
        self,
        symbol: str,
        ui_amount: float | str,
        pool: PoolSnapshot,
        window: MarketWindow,
        now: int,
    ) -> QuoteResult:
        """Payment quote in UI units for a registered market."""

        def run() -> Dict[str, Any]:
            market = self.config.market(symbol)
            amount = market.to_base_units(ui_amount)
            if amount <= 0:
                raise ValueError(f"amount must be positive: {ui_amount!r}")
            base = self._base_per_ib(window, now)
            quote = required_lock_amount(
                amount,
                now,
                window,
                base,
                pool,
                self.config.lock_solver_config(),
            )
            return {
                "market_id": market.market_id,
                "end_unix_ts": window.end_unix_ts,
                "lock_amount": market.to_ui_amount(quote.required_lock_amount),
                "required_lock_amount": quote.required_lock_amount,
                "merchant_transfer_amount": merchant_transfer_amount(amount, base),
                "amm_sold_portion": quote.amm_sold_portion,
            }

        return self._run("quote_payment", run)

    def quote_mint(self, window: MarketWindow, now: int, ib_amount: int) -> QuoteResult:
        """PT and YT minted for ``ib_amount`` IB at the current accrual."""

        def run() -> Dict[str, Any]:
            base = self._base_per_ib(window, now)
            quote = quote_mint_pyt(ib_amount, base)
            return {
                "ib_amount": quote.ib_amount,
                "pt_amount": quote.pt_amount,
                "yt_amount": quote.yt_amount,
                "base_per_ib_nano": base,
            }

        return self._run("mint", run)

    def quote_redeem(self, window: MarketWindow, now: int, pt_amount: int) -> QuoteResult:
        """IB returned for ``pt_amount`` PT plus as much YT."""

        def run() -> Dict[str, Any]:
            base = self._base_per_ib(window, now)
            return {
                "pt_amount": pt_amount,
                "ib_amount": quote_redeem_pyt(pt_amount, base),
                "base_per_ib_nano": base,
            }

        return self._run("redeem", run)

    def quote_add_liquidity(
        self,
        pool: PoolSnapshot,
        *,
        pt_amount: Optional[int] = None,
        ib_amount: Optional[int] = None,
    ) -> QuoteResult:
        """Counter-amount and LP minted for a deposit sized by exactly one side."""

        def run() -> Dict[str, Any]:
            if (pt_amount is None) == (ib_amount is None):
                raise ValueError("exactly one of pt_amount or ib_amount is required")
            if pt_amount is not None:
                return _liquidity_dict(quote_add_liquidity_from_pt(pool, pt_amount))
            return _liquidity_dict(quote_add_liquidity_from_ib(pool, ib_amount))

        return self._run("add_liquidity", run)

    def quote_remove_liquidity(self, pool: PoolSnapshot, lp_amount: int) -> QuoteResult:
        return self._run("remove_liquidity", lambda: _liquidity_dict(quote_remove_liquidity(pool, lp_amount)))


def _liquidity_dict(quote: LiquidityQuote) -> Dict[str, Any]:
    return {"pt_amount": quote.pt_amount, "ib_amount": quote.ib_amount, "lp_amount": quote.lp_amount}
