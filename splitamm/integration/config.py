"""
Quote configuration: solver budgets, accrual curve and the market registry.

Sources, lowest to highest precedence:
1. `QuoteConfig()` defaults.
2. A YAML file (`load_config(path)`).
3. `SPLITAMM_*` environment variables (`config_from_env`).

Example YAML:

    tolerance: 1
    max_iterations: 100
    lock_tolerance: 1
    accrual_base_nano: 1200000000
    markets:
      SOL:
        market_id: EvhH5tnknbgikGsqRMLMCXNPEnsKs8P3mWxpt65eG6fK
        decimals: 9
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from ..core.solvers import SolverConfig
from ..core.time_model import DEFAULT_ACCRUAL_BASE_NANO


ENV_PREFIX = "SPLITAMM_"
_INT_FIELDS = ("tolerance", "max_iterations", "lock_tolerance", "accrual_base_nano")


def _require_int(value: Any, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    return int(value)


def _int_env(name: str) -> Optional[int]:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw.strip(), 10)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


class UnknownMarket(KeyError):
    """Raised when a market symbol is not in the registry."""

    def __init__(self, symbol: str) -> None:
        self.symbol = symbol
        super().__init__(f"unknown market: {symbol!r}")


@dataclass(frozen=True)
class MarketInfo:
    symbol: str
    market_id: str
    decimals: int

    def __post_init__(self) -> None:
        if not isinstance(self.symbol, str) or not self.symbol:
            raise ValueError("symbol must be a non-empty string")
        if not isinstance(self.market_id, str) or not self.market_id:
            raise ValueError(f"{self.symbol}: market_id must be a non-empty string")
        _require_int(self.decimals, name=f"{self.symbol}.decimals")
        if not (0 <= self.decimals <= 18):
            raise ValueError(f"{self.symbol}: decimals must be in [0, 18]: {self.decimals}")

    def to_base_units(self, ui_amount: float | str | Decimal) -> int:
        """Convert a UI amount (e.g. 1.5 SOL) to integer base units, rounding down."""
        return int(Decimal(str(ui_amount)).scaleb(self.decimals))

    def to_ui_amount(self, base_units: int) -> float:
        return base_units / 10**self.decimals


@dataclass(frozen=True)
class QuoteConfig:
    # Residual tolerance for the IB -> PT search, in fixed-point units.
    tolerance: int = 1
    # Evaluation budget for both bisection searches.
    max_iterations: int = 100
    # Residual tolerance for the lock-amount search, in base units.
    lock_tolerance: int = 1
    # External IB accrual curve: accrual_base ** years_elapsed.
    accrual_base_nano: int = DEFAULT_ACCRUAL_BASE_NANO

    markets: Dict[str, MarketInfo] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for name in _INT_FIELDS:
            _require_int(getattr(self, name), name=name)
        if self.accrual_base_nano <= 0:
            raise ValueError(f"accrual_base_nano must be positive: {self.accrual_base_nano}")
        # Delegates the remaining range checks.
        self.solver_config()
        self.lock_solver_config()

    def solver_config(self) -> SolverConfig:
        return SolverConfig(tolerance=self.tolerance, max_iterations=self.max_iterations)

    def lock_solver_config(self) -> SolverConfig:
        return SolverConfig(tolerance=self.lock_tolerance, max_iterations=self.max_iterations)

    def market(self, symbol: str) -> MarketInfo:
        try:
            return self.markets[symbol]
        except KeyError:
            raise UnknownMarket(symbol) from None


def config_from_mapping(obj: Mapping[str, Any]) -> QuoteConfig:
    if not isinstance(obj, Mapping):
        raise TypeError("config must be a mapping")
    unknown = set(obj) - set(_INT_FIELDS) - {"markets"}
    if unknown:
        raise ValueError(f"unknown config keys: {sorted(unknown)}")

    kwargs: Dict[str, Any] = {name: obj[name] for name in _INT_FIELDS if name in obj}

    markets_raw = obj.get("markets") or {}
    if not isinstance(markets_raw, Mapping):
        raise TypeError("markets must be a mapping of symbol -> market")
    markets: Dict[str, MarketInfo] = {}
    for symbol, entry in markets_raw.items():
        if not isinstance(entry, Mapping):
            raise TypeError(f"market {symbol!r} must be a mapping")
        markets[str(symbol)] = MarketInfo(
            symbol=str(symbol),
            market_id=entry.get("market_id", ""),
            decimals=entry.get("decimals", 0),
        )
    kwargs["markets"] = markets
    return QuoteConfig(**kwargs)


def load_config(path: Path | str) -> QuoteConfig:
    """Load a `QuoteConfig` from a YAML file. An empty file yields the defaults."""
    obj = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    if obj is None:
        return QuoteConfig()
    return config_from_mapping(obj)


def config_from_env(base: Optional[QuoteConfig] = None) -> QuoteConfig:
    """Apply `SPLITAMM_*` overrides on top of ``base``.

    If ``base`` is omitted and `SPLITAMM_CONFIG` names a file, that file is
    loaded first.
    """
    if base is None:
        path = os.environ.get(ENV_PREFIX + "CONFIG", "").strip()
        base = load_config(path) if path else QuoteConfig()

    overrides: Dict[str, int] = {}
    for name in _INT_FIELDS:
        value = _int_env(ENV_PREFIX + name.upper())
        if value is not None:
            overrides[name] = value
    return replace(base, **overrides) if overrides else base
