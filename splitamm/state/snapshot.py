"""
Snapshot encoding for pool and market state.

Goals:
- Plain-dict serialization of `PoolSnapshot` / `MarketWindow` for config files
  and CLI input.
- Decoding of raw on-chain account fields, which arrive as camelCase keys with
  either int or base-16 string values.
- Explicit versioning so stored snapshots can be rejected when the format moves.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Mapping, Tuple

from .market import MarketWindow, PoolSnapshot


SNAPSHOT_VERSION = 1

_HEX_RE = re.compile(r"^(0x)?[0-9a-fA-F]+$")

POOL_FIELDS: Tuple[str, ...] = tuple(PoolSnapshot.__dataclass_fields__)
WINDOW_FIELDS: Tuple[str, ...] = tuple(MarketWindow.__dataclass_fields__)

# On-chain account field name -> snapshot field name.
_AMM_ACCOUNT_FIELDS: Dict[str, str] = {
    "nPt": "n_pt",
    "nAsset": "n_asset",
    "scalarRootNano": "scalar_root_nano",
    "lastImpliedRateNano": "last_implied_rate_nano",
    "nIb": "n_ib",
    "lpSupply": "lp_supply",
}
_MARKET_ACCOUNT_FIELDS: Dict[str, str] = {
    "startUnixTs": "start_unix_ts",
    "endUnixTs": "end_unix_ts",
}
_OPTIONAL_POOL_FIELDS = frozenset({"n_ib", "lp_supply"})


def _require_int(value: Any, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    return int(value)


def _parse_account_int(value: Any, *, name: str) -> int:
    """Account integers are serialized as hex strings; plain ints pass through."""
    if isinstance(value, str):
        raw = value.strip()
        if not raw or not _HEX_RE.match(raw):
            raise ValueError(f"{name} must be a base-16 string, got {value!r}")
        return int(raw, 16)
    return _require_int(value, name=name)


def snapshot_to_dict(pool: PoolSnapshot) -> Dict[str, int]:
    out: Dict[str, int] = {"version": SNAPSHOT_VERSION}
    out.update({name: getattr(pool, name) for name in POOL_FIELDS})
    return out


def snapshot_from_dict(d: Mapping[str, Any]) -> PoolSnapshot:
    """Decode a snapshot dict. Raises KeyError on missing required fields."""
    version = d.get("version", SNAPSHOT_VERSION)
    if version != SNAPSHOT_VERSION:
        raise ValueError(f"unsupported snapshot version: {version!r}")
    kwargs: Dict[str, int] = {}
    for name in POOL_FIELDS:
        if name not in d and name in _OPTIONAL_POOL_FIELDS:
            continue
        kwargs[name] = _require_int(d[name], name=name)
    return PoolSnapshot(**kwargs)


def window_to_dict(window: MarketWindow) -> Dict[str, int]:
    return {name: getattr(window, name) for name in WINDOW_FIELDS}


def window_from_dict(d: Mapping[str, Any]) -> MarketWindow:
    return MarketWindow(**{name: _require_int(d[name], name=name) for name in WINDOW_FIELDS})


def snapshot_from_accounts(
    market_account: Mapping[str, Any],
    amm_account: Mapping[str, Any],
) -> Tuple[PoolSnapshot, MarketWindow]:
    """Build a snapshot and window from decoded market and AMM account fields."""
    pool_kwargs: Dict[str, int] = {}
    for key, name in _AMM_ACCOUNT_FIELDS.items():
        if key not in amm_account:
            if name in _OPTIONAL_POOL_FIELDS:
                continue
            raise KeyError(f"AMM account is missing {key!r}")
        pool_kwargs[name] = _parse_account_int(amm_account[key], name=key)

    window_kwargs: Dict[str, int] = {}
    for key, name in _MARKET_ACCOUNT_FIELDS.items():
        if key not in market_account:
            raise KeyError(f"market account is missing {key!r}")
        window_kwargs[name] = _parse_account_int(market_account[key], name=key)

    return PoolSnapshot(**pool_kwargs), MarketWindow(**window_kwargs)
