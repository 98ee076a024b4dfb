from __future__ import annotations

from decimal import Decimal

from ...core.constants import DEFAULT_TAX_RATE
from .base import PayrollCalculator


class FlatRateTaxCalculator(PayrollCalculator):
    """Flat rule: tax is a fixed share of gross pay."""

    def __init__(self, rate: Decimal = DEFAULT_TAX_RATE):
        rate = Decimal(str(rate))
        if not Decimal("0") <= rate < Decimal("1"):
            raise ValueError("tax rate must be in [0, 1)")
        self._rate = rate

    @property
    def rate(self) -> Decimal:
        return self._rate

    def tax(self, gross: Decimal) -> Decimal:
        return gross * self._rate
