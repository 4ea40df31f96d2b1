"""Tests for splitamm/core/solvers.py: PT <-> IB trade solvers."""

from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

import splitamm.core.solvers as solvers
from splitamm.core.errors import InvalidProportion, RootNotFound
from splitamm.core.fixed_point import PRECISION
from splitamm.core.pricing import trade_exchange_rate_nano
from splitamm.core.solvers import SolverConfig, apply_pt_swap, ib_to_pt, pt_to_ib
from splitamm.core.time_model import SECONDS_PER_YEAR
from splitamm.state.market import MarketWindow, PoolSnapshot

END = 1_800_000_000
NOW = END - SECONDS_PER_YEAR

POOL = PoolSnapshot(
    n_pt=1_000_000_000,
    n_asset=1_000_000_000,
    scalar_root_nano=100_000_000,
    last_implied_rate_nano=1_050_000_000,
)
WINDOW = MarketWindow(start_unix_ts=NOW, end_unix_ts=END)


# ---------------------------------------------------------------------------
# PT -> IB
# ---------------------------------------------------------------------------

class TestPtToIb:
    def test_five_percent_scenario(self):
        # rate ~= 1.05 + ln(1.001 / 0.999) / 0.1 ~= 1.07
        d_ib = pt_to_ib(POOL, WINDOW, NOW, 1_000_000)
        assert d_ib != 1_000_000
        assert 934_000 <= d_ib <= 935_000

    def test_zero_trade(self):
        assert pt_to_ib(POOL, WINDOW, NOW, 0) == 0

    def test_one_to_one_at_maturity(self):
        assert pt_to_ib(POOL, WINDOW, END, 12_345) == 12_345
        assert pt_to_ib(POOL, WINDOW, END + 86_400, 12_345) == 12_345

    def test_rejects_non_int(self):
        with pytest.raises(TypeError):
            pt_to_ib(POOL, WINDOW, NOW, 1.5)

    @settings(max_examples=200)
    @given(
        d_pt=st.integers(min_value=1_000, max_value=50_000_000),
        gap=st.integers(min_value=10, max_value=1_000_000),
    )
    def test_monotonic_in_trade_size(self, d_pt, gap):
        assert pt_to_ib(POOL, WINDOW, NOW, d_pt + gap) > pt_to_ib(POOL, WINDOW, NOW, d_pt)


# ---------------------------------------------------------------------------
# IB -> PT
# ---------------------------------------------------------------------------

class TestIbToPt:
    @settings(max_examples=200)
    @given(d_pt=st.integers(min_value=1_000, max_value=10_000_000))
    def test_round_trip(self, d_pt):
        d_ib = pt_to_ib(POOL, WINDOW, NOW, d_pt)
        back = ib_to_pt(POOL, WINDOW, NOW, d_ib)
        assert d_pt - 1 <= back <= d_pt

    @pytest.mark.parametrize("d_pt", [39_883, 129_613, 150_550, 4_499_993, 7_499_987])
    def test_round_trip_lands_on_first_preimage(self, d_pt):
        d_ib = pt_to_ib(POOL, WINDOW, NOW, d_pt)
        back = ib_to_pt(POOL, WINDOW, NOW, d_ib)
        assert d_pt - 1 <= back <= d_pt
        assert pt_to_ib(POOL, WINDOW, NOW, back) == d_ib

    @settings(max_examples=200)
    @given(d_ib=st.integers(min_value=1_000, max_value=12_000_000))
    def test_returns_smallest_sufficient_amount(self, d_ib):
        d_pt = ib_to_pt(POOL, WINDOW, NOW, d_ib)
        assert pt_to_ib(POOL, WINDOW, NOW, d_pt) >= d_ib
        assert pt_to_ib(POOL, WINDOW, NOW, d_pt - 1) < d_ib

    def test_residual_decreases_over_search_range(self):
        # The bisection assumes f(d_pt) = rate(d_pt) - d_pt / d_ib is decreasing.
        d_ib = pt_to_ib(POOL, WINDOW, NOW, 1_000_000)
        prev = None
        for d_pt in range(0, 100_000_000, 1_000_000):
            rate = trade_exchange_rate_nano(POOL, WINDOW, NOW, d_pt)
            f = rate - (d_pt * PRECISION) // d_ib
            if prev is not None:
                assert f < prev
            prev = f

    def test_one_to_one_at_maturity(self):
        assert ib_to_pt(POOL, WINDOW, END, 12_345) == 12_345

    def test_at_maturity_cannot_exceed_reserves(self):
        with pytest.raises(RootNotFound):
            ib_to_pt(POOL, WINDOW, END, POOL.n_asset)

    def test_infeasible_amount_raises(self):
        with pytest.raises(RootNotFound) as excinfo:
            ib_to_pt(POOL, WINDOW, NOW, 10 * POOL.n_asset)
        assert excinfo.value.iterations <= 100

    def test_iteration_budget_is_enforced(self):
        d_ib = pt_to_ib(POOL, WINDOW, NOW, 1_000_000)
        with pytest.raises(RootNotFound) as excinfo:
            ib_to_pt(POOL, WINDOW, NOW, d_ib, SolverConfig(max_iterations=3))
        assert excinfo.value.iterations == 3

    def test_never_exceeds_default_budget(self, monkeypatch):
        calls = []
        real = solvers.exchange_rate_nano

        def counting(*args):
            calls.append(args)
            return real(*args)

        monkeypatch.setattr(solvers, "exchange_rate_nano", counting)
        with pytest.raises(RootNotFound):
            ib_to_pt(POOL, WINDOW, NOW, 10 * POOL.n_asset)
        assert 0 < len(calls) <= 100

    @pytest.mark.parametrize("d_ib", [0, -5])
    def test_non_positive_amount(self, d_ib):
        with pytest.raises(ValueError):
            ib_to_pt(POOL, WINDOW, NOW, d_ib)

    def test_empty_asset_side(self):
        pool = PoolSnapshot(
            n_pt=1_000,
            n_asset=0,
            scalar_root_nano=100_000_000,
            last_implied_rate_nano=1_050_000_000,
        )
        with pytest.raises(InvalidProportion):
            ib_to_pt(pool, WINDOW, NOW, 10)


class TestSolverConfig:
    def test_defaults(self):
        cfg = SolverConfig()
        assert cfg.tolerance == 1
        assert cfg.max_iterations == 100

    def test_rejects_zero_iterations(self):
        with pytest.raises(ValueError):
            SolverConfig(max_iterations=0)

    def test_rejects_negative_tolerance(self):
        with pytest.raises(ValueError):
            SolverConfig(tolerance=-1)

    def test_rejects_bool(self):
        with pytest.raises(TypeError):
            SolverConfig(max_iterations=True)


# ---------------------------------------------------------------------------
# post-trade snapshot
# ---------------------------------------------------------------------------

class TestApplyPtSwap:
    def test_moves_reserves(self):
        quote = apply_pt_swap(POOL, WINDOW, NOW, 1_000_000)
        assert quote.d_ib == pt_to_ib(POOL, WINDOW, NOW, 1_000_000)
        assert quote.pool_after.n_pt == POOL.n_pt + 1_000_000
        assert quote.pool_after.n_asset == POOL.n_asset - 1_000_000
        assert quote.pool_after.scalar_root_nano == POOL.scalar_root_nano

    def test_selling_pt_raises_implied_rate(self):
        quote = apply_pt_swap(POOL, WINDOW, NOW, 1_000_000)
        assert quote.pool_after.last_implied_rate_nano > POOL.last_implied_rate_nano

    def test_rate_is_continuous_after_trade(self):
        quote = apply_pt_swap(POOL, WINDOW, NOW, 5_000_000)
        next_rate = trade_exchange_rate_nano(quote.pool_after, WINDOW, NOW, 0)
        assert abs(next_rate - quote.exchange_rate_nano) <= 2

    def test_keeps_last_rate_at_maturity(self):
        quote = apply_pt_swap(POOL, WINDOW, END, 1_000)
        assert quote.d_ib == 1_000
        assert quote.pool_after.last_implied_rate_nano == POOL.last_implied_rate_nano
