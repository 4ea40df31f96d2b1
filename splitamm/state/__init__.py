"""
Market state value types and snapshot codecs
"""

from .market import MarketWindow, PoolSnapshot
from .snapshot import (
    SNAPSHOT_VERSION,
    snapshot_from_accounts,
    snapshot_from_dict,
    snapshot_to_dict,
    window_from_dict,
    window_to_dict,
)

__all__ = [
    "MarketWindow",
    "PoolSnapshot",
    "SNAPSHOT_VERSION",
    "snapshot_from_accounts",
    "snapshot_from_dict",
    "snapshot_to_dict",
    "window_from_dict",
    "window_to_dict",
]
