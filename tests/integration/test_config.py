"""Tests for YAML/env quote configuration."""

from __future__ import annotations

from decimal import Decimal

import pytest

from splitamm.core.solvers import SolverConfig
from splitamm.core.time_model import DEFAULT_ACCRUAL_BASE_NANO
from splitamm.integration.config import (
    MarketInfo,
    QuoteConfig,
    UnknownMarket,
    config_from_env,
    config_from_mapping,
    load_config,
)

CONFIG_YAML = """\
tolerance: 2
max_iterations: 64
lock_tolerance: 3
markets:
  SOL:
    market_id: EvhH5tnknbgikGsqRMLMCXNPEnsKs8P3mWxpt65eG6fK
    decimals: 9
  USDC:
    market_id: usdc-market
    decimals: 6
"""


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("CONFIG", "TOLERANCE", "MAX_ITERATIONS", "LOCK_TOLERANCE", "ACCRUAL_BASE_NANO"):
        monkeypatch.delenv("SPLITAMM_" + name, raising=False)


def test_defaults():
    cfg = QuoteConfig()
    assert cfg.solver_config() == SolverConfig(tolerance=1, max_iterations=100)
    assert cfg.accrual_base_nano == DEFAULT_ACCRUAL_BASE_NANO
    assert cfg.markets == {}


def test_load_yaml(tmp_path):
    path = tmp_path / "quote.yaml"
    path.write_text(CONFIG_YAML, encoding="utf-8")
    cfg = load_config(path)

    assert cfg.solver_config() == SolverConfig(tolerance=2, max_iterations=64)
    assert cfg.lock_solver_config() == SolverConfig(tolerance=3, max_iterations=64)
    assert cfg.market("SOL").decimals == 9
    assert cfg.market("USDC").market_id == "usdc-market"


def test_empty_yaml_is_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(path) == QuoteConfig()


def test_unknown_key_rejected():
    with pytest.raises(ValueError, match="unknown config keys"):
        config_from_mapping({"tolerence": 1})


def test_invalid_iteration_budget():
    with pytest.raises(ValueError):
        config_from_mapping({"max_iterations": 0})


def test_non_int_tolerance():
    with pytest.raises(TypeError):
        config_from_mapping({"tolerance": "1"})


def test_unknown_market():
    with pytest.raises(UnknownMarket, match="unknown market") as excinfo:
        QuoteConfig().market("BTC")
    assert excinfo.value.symbol == "BTC"
    assert isinstance(excinfo.value, KeyError)


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("SPLITAMM_TOLERANCE", "5")
    monkeypatch.setenv("SPLITAMM_MAX_ITERATIONS", " 40 ")
    cfg = config_from_env(QuoteConfig(lock_tolerance=7))
    assert (cfg.tolerance, cfg.max_iterations, cfg.lock_tolerance) == (5, 40, 7)


def test_env_config_file(monkeypatch, tmp_path):
    path = tmp_path / "quote.yaml"
    path.write_text(CONFIG_YAML, encoding="utf-8")
    monkeypatch.setenv("SPLITAMM_CONFIG", str(path))
    monkeypatch.setenv("SPLITAMM_LOCK_TOLERANCE", "9")

    cfg = config_from_env()
    assert cfg.tolerance == 2
    assert cfg.lock_tolerance == 9
    assert "SOL" in cfg.markets


def test_env_bad_integer(monkeypatch):
    monkeypatch.setenv("SPLITAMM_TOLERANCE", "one")
    with pytest.raises(ValueError, match="SPLITAMM_TOLERANCE"):
        config_from_env(QuoteConfig())


def test_blank_env_is_ignored(monkeypatch):
    monkeypatch.setenv("SPLITAMM_TOLERANCE", "  ")
    assert config_from_env(QuoteConfig()) == QuoteConfig()


# ---------------------------------------------------------------------------
# MarketInfo
# ---------------------------------------------------------------------------

class TestMarketInfo:
    def test_to_base_units(self):
        sol = MarketInfo(symbol="SOL", market_id="m", decimals=9)
        assert sol.to_base_units(1.5) == 1_500_000_000
        assert sol.to_base_units("0.000000001") == 1

    def test_to_base_units_is_exact_for_short_decimals(self):
        usd = MarketInfo(symbol="USD", market_id="m", decimals=2)
        assert usd.to_base_units(0.29) == 29
        assert usd.to_base_units(Decimal("1.239")) == 123

    def test_to_ui_amount(self):
        usdc = MarketInfo(symbol="USDC", market_id="m", decimals=6)
        assert usdc.to_ui_amount(2_500_000) == 2.5

    @pytest.mark.parametrize("decimals", [-1, 19])
    def test_decimals_range(self, decimals):
        with pytest.raises(ValueError):
            MarketInfo(symbol="X", market_id="m", decimals=decimals)

    def test_market_id_required(self):
        with pytest.raises(ValueError):
            MarketInfo(symbol="X", market_id="", decimals=6)
