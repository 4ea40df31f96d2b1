"""
Integration shell: configuration loading and result-object quoting
"""

from .config import (
    MarketInfo,
    QuoteConfig,
    UnknownMarket,
    config_from_env,
    config_from_mapping,
    load_config,
)
from .quote_engine import QuoteEngine, QuoteResult

__all__ = [
    "MarketInfo",
    "QuoteConfig",
    "QuoteEngine",
    "QuoteResult",
    "UnknownMarket",
    "config_from_env",
    "config_from_mapping",
    "load_config",
]
