"""
Core pricing kernels
"""

from .errors import (
    DegenerateAnchor,
    InvalidProportion,
    NegativeExchangeRate,
    PricingError,
    RootNotFound,
)
from .fixed_point import PRECISION, div_trunc, ln_odds_nano, pow_nano
from .time_model import (
    SECONDS_PER_YEAR,
    base_per_ib_nano,
    days_to_maturity,
    time_to_expiry,
    years_elapsed_nano,
    years_to_expiry_nano,
)
from .pricing import (
    exchange_rate_nano,
    implied_rate_nano,
    proportion_nano,
    rate_scalar_nano,
    trade_exchange_rate_nano,
    update_rate_anchor,
)
from .solvers import SolverConfig, SwapQuote, apply_pt_swap, ib_to_pt, pt_to_ib
from .lock import LockQuote, required_lock_amount
from .split import MintQuote, merchant_transfer_amount, quote_mint_pyt, quote_redeem_pyt
from .liquidity import (
    LiquidityQuote,
    quote_add_liquidity_from_ib,
    quote_add_liquidity_from_pt,
    quote_remove_liquidity,
)

__all__ = [
    "PricingError",
    "InvalidProportion",
    "DegenerateAnchor",
    "NegativeExchangeRate",
    "RootNotFound",
    "PRECISION",
    "div_trunc",
    "ln_odds_nano",
    "pow_nano",
    "SECONDS_PER_YEAR",
    "base_per_ib_nano",
    "days_to_maturity",
    "time_to_expiry",
    "years_elapsed_nano",
    "years_to_expiry_nano",
    "exchange_rate_nano",
    "implied_rate_nano",
    "proportion_nano",
    "rate_scalar_nano",
    "trade_exchange_rate_nano",
    "update_rate_anchor",
    "SolverConfig",
    "SwapQuote",
    "apply_pt_swap",
    "ib_to_pt",
    "pt_to_ib",
    "LockQuote",
    "required_lock_amount",
    "MintQuote",
    "merchant_transfer_amount",
    "quote_mint_pyt",
    "quote_redeem_pyt",
    "LiquidityQuote",
    "quote_add_liquidity_from_ib",
    "quote_add_liquidity_from_pt",
    "quote_remove_liquidity",
]
