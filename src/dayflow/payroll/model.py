from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..common.datetime_utils import iso
from ..core.enums import PayrollStatus

ZERO = Decimal("0.00")


def money(value: Optional[Decimal]) -> Optional[float]:
    return float(value) if value is not None else None


@dataclass(frozen=True)
class PayBreakdown:
    """Informational itemisation; never summed into the totals."""

    hra: Decimal = ZERO
    travel_allowance: Decimal = ZERO
    medical_allowance: Decimal = ZERO
    provident_fund: Decimal = ZERO
    insurance: Decimal = ZERO
    other_deductions: Decimal = ZERO

    # public JSON name -> attribute
    FIELDS = {
        "hra": "hra",
        "travelAllowance": "travel_allowance",
        "medicalAllowance": "medical_allowance",
        "providentFund": "provident_fund",
        "insurance": "insurance",
        "otherDeductions": "other_deductions",
    }

    def to_dict(self) -> dict:
        return {key: money(getattr(self, attr)) for key, attr in self.FIELDS.items()}


@dataclass(frozen=True)
class PayrollRecord:
    """Domain entity: one employee's pay for one month label.

    (user_id, month) is unique. ``tax`` and ``net_salary`` are derived and
    Paid is terminal.
    """

    payroll_id: int
    user_id: int
    employee_id: str
    employee_name: str
    month: str
    base_salary: Decimal
    allowances: Decimal
    deductions: Decimal
    bonus: Decimal
    tax: Decimal
    net_salary: Decimal
    status: PayrollStatus
    breakdown: PayBreakdown = field(default_factory=PayBreakdown)
    payment_date: Optional[datetime] = None
    payment_method: Optional[str] = None
    remarks: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_paid(self) -> bool:
        return self.status == PayrollStatus.PAID

    @property
    def gross(self) -> Decimal:
        return self.base_salary + self.allowances + self.bonus

    def to_dict(self) -> dict:
        return {
            "id": self.payroll_id,
            "userId": self.user_id,
            "employeeId": self.employee_id,
            "employeeName": self.employee_name,
            "month": self.month,
            "baseSalary": money(self.base_salary),
            "allowances": money(self.allowances),
            "deductions": money(self.deductions),
            "bonus": money(self.bonus),
            "tax": money(self.tax),
            "netSalary": money(self.net_salary),
            "status": self.status.value,
            "paymentDate": iso(self.payment_date),
            "paymentMethod": self.payment_method,
            "remarks": self.remarks,
            "breakdown": self.breakdown.to_dict(),
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }


@dataclass(frozen=True)
class PayrollAmounts:
    """Everything a create/update persists besides identity and status."""

    base_salary: Decimal
    allowances: Decimal
    deductions: Decimal
    bonus: Decimal
    tax: Decimal
    net_salary: Decimal
    breakdown: PayBreakdown
    remarks: Optional[str] = None


@dataclass(frozen=True)
class PayrollTotals:
    count: int
    total: Decimal

    @property
    def average(self) -> Decimal:
        return (self.total / self.count) if self.count else ZERO
