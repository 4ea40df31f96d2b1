"""
splitamm: off-chain quoting for a PT/IB yield-tokenization AMM.

The functional core lives in `splitamm.core` (pure, integer fixed-point
kernels); `splitamm.state` holds the immutable snapshot types and
`splitamm.integration` the config loading and result-object shell.
"""

from .core import (
    PRECISION,
    SECONDS_PER_YEAR,
    DegenerateAnchor,
    InvalidProportion,
    NegativeExchangeRate,
    PricingError,
    RootNotFound,
    ib_to_pt,
    pt_to_ib,
    required_lock_amount,
    years_to_expiry_nano,
)
from .state import MarketWindow, PoolSnapshot

__version__ = "0.1.0"

__all__ = [
    "PRECISION",
    "SECONDS_PER_YEAR",
    "DegenerateAnchor",
    "InvalidProportion",
    "NegativeExchangeRate",
    "PricingError",
    "RootNotFound",
    "ib_to_pt",
    "pt_to_ib",
    "required_lock_amount",
    "years_to_expiry_nano",
    "MarketWindow",
    "PoolSnapshot",
]
