"""Exception types for the pricing core.

Every failure is terminal for the calculation call: nothing here is retried
internally. Callers that prefer result objects over exceptions should go
through ``splitamm.integration.quote_engine``.
"""

from __future__ import annotations


class PricingError(Exception):
    """Base class for pricing failures. ``code`` is stable across releases."""

    code: str = "PRICING_ERROR"


class InvalidProportion(PricingError):
    """Raised when a proportion lies at or beyond the (0, PRECISION) boundary."""

    code = "INVALID_PROPORTION"

    def __init__(self, proportion_nano: int) -> None:
        self.proportion_nano = proportion_nano
        super().__init__(f"invalid proportion: {proportion_nano}")


class DegenerateAnchor(PricingError):
    """Raised when the calibrated rate anchor is not positive."""

    code = "DEGENERATE_ANCHOR"

    def __init__(self, rate_anchor_nano: int) -> None:
        self.rate_anchor_nano = rate_anchor_nano
        super().__init__(f"degenerate rate anchor: {rate_anchor_nano}")


class NegativeExchangeRate(PricingError):
    """Raised when the curve prices IB at or below zero relative to PT."""

    code = "NEGATIVE_EXCHANGE_RATE"

    def __init__(self, exchange_rate_nano: int) -> None:
        self.exchange_rate_nano = exchange_rate_nano
        super().__init__(f"non-positive exchange rate: {exchange_rate_nano}")


class RootNotFound(PricingError):
    """Raised when a bisection search exhausts its budget without converging."""

    code = "ROOT_NOT_FOUND"

    def __init__(self, what: str, iterations: int) -> None:
        self.what = what
        self.iterations = iterations
        super().__init__(f"failed to find {what} after {iterations} iterations")
