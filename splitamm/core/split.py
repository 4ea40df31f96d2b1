"""
PT + YT split quotes.

Minting splits IB into equal amounts of PT and YT at the current accrual
(``base_per_ib``); redeeming a PT + YT pair returns IB at the same rate. Both
round down, so the user never receives more than the accrual supports.
"""

from __future__ import annotations

from dataclasses import dataclass

from .fixed_point import PRECISION, require_int


@dataclass(frozen=True)
class MintQuote:
    ib_amount: int
    pt_amount: int
    yt_amount: int


def _check_base(base_per_ib_nano: int) -> None:
    require_int("base_per_ib_nano", base_per_ib_nano)
    if base_per_ib_nano <= 0:
        raise ValueError(f"base_per_ib_nano must be positive: {base_per_ib_nano}")


def quote_mint_pyt(ib_amount: int, base_per_ib_nano: int) -> MintQuote:
    """PT and YT minted for ``ib_amount`` IB: ``floor(ib * base_per_ib)`` each."""
    ib_amount = require_int("ib_amount", ib_amount)
    _check_base(base_per_ib_nano)
    if ib_amount < 0:
        raise ValueError(f"ib_amount must be non-negative: {ib_amount}")
    minted = (ib_amount * base_per_ib_nano) // PRECISION
    return MintQuote(ib_amount=ib_amount, pt_amount=minted, yt_amount=minted)


def quote_redeem_pyt(pt_amount: int, base_per_ib_nano: int) -> int:
    """IB returned for ``pt_amount`` PT plus as much YT: ``floor(pt / base_per_ib)``."""
    pt_amount = require_int("pt_amount", pt_amount)
    _check_base(base_per_ib_nano)
    if pt_amount < 0:
        raise ValueError(f"pt_amount must be non-negative: {pt_amount}")
    return (pt_amount * PRECISION) // base_per_ib_nano


def merchant_transfer_amount(target_amount: int, base_per_ib_nano: int) -> int:
    """IB transferred to a merchant owed ``target_amount`` base units."""
    return quote_redeem_pyt(target_amount, base_per_ib_nano)
