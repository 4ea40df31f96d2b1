"""Tests for PT + YT split quotes."""

from __future__ import annotations

import pytest

from splitamm.core.fixed_point import PRECISION
from splitamm.core.split import merchant_transfer_amount, quote_mint_pyt, quote_redeem_pyt

BASE = 1_200_000_000


def test_mint_at_par() -> None:
    quote = quote_mint_pyt(1_000, PRECISION)
    assert (quote.pt_amount, quote.yt_amount) == (1_000, 1_000)


def test_mint_with_accrual() -> None:
    quote = quote_mint_pyt(1_000, BASE)
    assert quote.ib_amount == 1_000
    assert quote.pt_amount == quote.yt_amount == 1_200


def test_redeem_with_accrual() -> None:
    assert quote_redeem_pyt(1_200, BASE) == 1_000


def test_redeem_rounds_down() -> None:
    assert quote_redeem_pyt(1_000, BASE) == 833


def test_merchant_transfer() -> None:
    assert merchant_transfer_amount(1_000_000, BASE) == 833_333


@pytest.mark.parametrize("fn", [quote_mint_pyt, quote_redeem_pyt])
def test_rejects_negative_amount(fn) -> None:
    with pytest.raises(ValueError):
        fn(-1, BASE)


@pytest.mark.parametrize("fn", [quote_mint_pyt, quote_redeem_pyt])
def test_rejects_non_positive_base(fn) -> None:
    with pytest.raises(ValueError):
        fn(1, 0)
