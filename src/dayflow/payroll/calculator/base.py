from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")


def to_cents(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class PayFigures:
    gross: Decimal
    tax: Decimal
    net: Decimal


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def tax(self, gross: Decimal) -> Decimal:
        raise NotImplementedError

    def compute(
        self,
        *,
        base_salary: Decimal,
        allowances: Decimal,
        deductions: Decimal,
        bonus: Decimal,
    ) -> PayFigures:
        """gross = base + allowances + bonus; net = gross - deductions - tax."""
        gross = base_salary + allowances + bonus
        tax = to_cents(self.tax(gross))
        return PayFigures(gross=gross, tax=tax, net=gross - deductions - tax)
