from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Optional

from ..common.datetime_utils import Clock, SystemClock, iso, month_label
from ..common.pagination import PageRequest
from ..common.validators import optional_amount, optional_choice, optional_str, require_amount, require_non_empty
from ..core.constants import DEFAULT_PAYMENT_METHOD
from ..core.enums import PayrollStatus
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from .calculator.base import PayrollCalculator
from .calculator.flat_rate_calculator import FlatRateTaxCalculator
from .model import ZERO, PayBreakdown, PayrollAmounts, PayrollRecord, money
from .repository import PayrollRepository

logger = logging.getLogger(__name__)


def _breakdown(raw: Any, base: Optional[PayBreakdown] = None) -> PayBreakdown:
    """Merge a partial ``breakdown`` object onto ``base``."""
    current = base or PayBreakdown()
    if raw is None:
        return current
    if not isinstance(raw, dict):
        raise ValidationError("Breakdown must be an object")
    changes = {}
    for key, attr in PayBreakdown.FIELDS.items():
        if key in raw:
            changes[attr] = optional_amount(raw[key], key, default=ZERO)
    return replace(current, **changes)


class PayrollService:
    """Use case: monthly payroll records, payments and payslips.

    Tax and net salary are always recomputed by the calculator right before
    a write; caller-supplied values for them are ignored.
    """

    def __init__(
        self,
        payrolls: PayrollRepository,
        employees: EmployeeRepository,
        *,
        calculator: PayrollCalculator | None = None,
        clock: Clock | None = None,
        default_payment_method: str = DEFAULT_PAYMENT_METHOD,
        company_name: str = "DayFlow Inc.",
        company_address: str = "",
    ):
        self._payrolls = payrolls
        self._employees = employees
        self._calculator = calculator or FlatRateTaxCalculator()
        self._clock = clock or SystemClock()
        self._default_payment_method = default_payment_method
        self._company = {"name": company_name, "address": company_address}

    def _amounts(
        self,
        *,
        base_salary: Decimal,
        allowances: Decimal,
        deductions: Decimal,
        bonus: Decimal,
        breakdown: PayBreakdown,
        remarks: Optional[str],
    ) -> PayrollAmounts:
        figures = self._calculator.compute(
            base_salary=base_salary, allowances=allowances, deductions=deductions, bonus=bonus
        )
        if figures.net < 0:
            raise ValidationError("Net salary cannot be negative")
        return PayrollAmounts(
            base_salary=base_salary,
            allowances=allowances,
            deductions=deductions,
            bonus=bonus,
            tax=figures.tax,
            net_salary=figures.net,
            breakdown=breakdown,
            remarks=remarks,
        )

    def _get(self, payroll_id: int) -> PayrollRecord:
        record = self._payrolls.get_by_id(int(payroll_id))
        if not record:
            raise NotFoundError("Payroll not found")
        return record

    def current_month(self) -> str:
        return month_label(self._clock.today())

    def create(self, payload: Dict[str, Any]) -> PayrollRecord:
        employee_id = require_non_empty(payload.get("employeeId"), "Employee ID").upper()
        month = require_non_empty(payload.get("month"), "Month")
        amounts = self._amounts(
            base_salary=require_amount(payload.get("baseSalary"), "Base salary", positive=True),
            allowances=optional_amount(payload.get("allowances"), "Allowances", default=ZERO),
            deductions=optional_amount(payload.get("deductions"), "Deductions", default=ZERO),
            bonus=optional_amount(payload.get("bonus"), "Bonus", default=ZERO),
            breakdown=_breakdown(payload.get("breakdown")),
            remarks=optional_str(payload.get("remarks"), "Remarks"),
        )

        employee = self._employees.get_by_employee_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")
        if self._payrolls.get_for_user_and_month(employee.user_id, month):
            raise ConflictError("Payroll for this month already exists")

        payroll_id = self._payrolls.create(
            user_id=employee.user_id,
            employee_id=employee.employee_id,
            employee_name=employee.name,
            month=month,
            amounts=amounts,
            created_at=self._clock.now(),
        )
        logger.info("Payroll %s created for %s (%s)", payroll_id, employee.employee_id, month)
        return self._get(payroll_id)

    def update(self, payroll_id: int, payload: Dict[str, Any]) -> PayrollRecord:
        record = self._get(payroll_id)
        if record.is_paid:
            raise ConflictError("Cannot update paid payroll")

        base_salary = record.base_salary
        if "baseSalary" in payload:
            base_salary = require_amount(payload["baseSalary"], "Base salary", positive=True)
        amounts = self._amounts(
            base_salary=base_salary,
            allowances=optional_amount(payload.get("allowances"), "Allowances", default=record.allowances),
            deductions=optional_amount(payload.get("deductions"), "Deductions", default=record.deductions),
            bonus=optional_amount(payload.get("bonus"), "Bonus", default=record.bonus),
            breakdown=_breakdown(payload.get("breakdown"), record.breakdown),
            remarks=optional_str(payload["remarks"], "Remarks") if "remarks" in payload else record.remarks,
        )
        if not self._payrolls.update_amounts(record.payroll_id, amounts, updated_at=self._clock.now()):
            raise ConflictError("Cannot update paid payroll")
        logger.info("Payroll %s updated", record.payroll_id)
        return self._get(record.payroll_id)

    def process_payment(self, payroll_id: int, payload: Dict[str, Any]) -> PayrollRecord:
        record = self._get(payroll_id)
        if record.is_paid:
            raise ConflictError("Payroll already paid")
        method = optional_str(payload.get("paymentMethod"), "Payment method") or self._default_payment_method
        if not self._payrolls.mark_paid(record.payroll_id, payment_date=self._clock.now(), payment_method=method):
            raise ConflictError("Payroll already paid")
        logger.info("Payroll %s paid via %s", record.payroll_id, method)
        return self._get(record.payroll_id)

    def get(self, viewer: Employee, payroll_id: int) -> PayrollRecord:
        record = self._get(payroll_id)
        if record.user_id != viewer.user_id and not viewer.role.can_administer_payroll:
            raise AuthorizationError("You can only view your own payroll")
        return record

    def payslip(self, viewer: Employee, payroll_id: int) -> dict:
        record = self._get(payroll_id)
        if record.user_id != viewer.user_id and not viewer.role.can_administer_payroll:
            raise AuthorizationError("You can only generate your own payslip")
        employee = self._employees.get_by_id(record.user_id)
        return {
            "company": dict(self._company),
            "employee": {
                "name": record.employee_name,
                "employeeId": record.employee_id,
                "department": employee.department if employee else None,
                "position": employee.position if employee else None,
            },
            "payPeriod": record.month,
            "earnings": {
                "baseSalary": money(record.base_salary),
                "allowances": money(record.allowances),
                "bonus": money(record.bonus),
                "gross": money(record.gross),
            },
            "deductions": {
                "tax": money(record.tax),
                "other": money(record.deductions),
                "total": money(record.tax + record.deductions),
            },
            "netSalary": money(record.net_salary),
            "breakdown": record.breakdown.to_dict(),
            "paymentDate": iso(record.payment_date),
            "paymentMethod": record.payment_method,
        }

    def my_payroll(self, employee: Employee, *, page: PageRequest, month: Optional[str] = None) -> dict:
        rows, total = self._payrolls.search(
            user_id=employee.user_id,
            month=(month or "").strip() or None,
            offset=page.offset,
            limit=page.limit,
        )
        current = self._payrolls.get_for_user_and_month(employee.user_id, self.current_month())
        return {
            "payrolls": [r.to_dict() for r in rows],
            "currentPayroll": current.to_dict() if current else None,
            "pagination": page.describe(total),
        }

    def all_payrolls(
        self,
        *,
        page: PageRequest,
        month: Optional[str] = None,
        employee_id: Optional[str] = None,
        status: Optional[str] = None,
    ) -> dict:
        filters = {
            "month": (month or "").strip() or None,
            "employee_id": (employee_id or "").strip().upper() or None,
            "status": optional_choice(status, PayrollStatus, "status"),
        }
        rows, total = self._payrolls.search(offset=page.offset, limit=page.limit, **filters)
        totals = self._payrolls.totals(**filters)
        return {
            "payrolls": [r.to_dict() for r in rows],
            "stats": {
                "totalPayroll": money(totals.total),
                "totalEmployees": totals.count,
                "avgSalary": money(totals.average.quantize(Decimal("0.01"))),
            },
            "pagination": page.describe(total),
        }

    def current_summary(self, user_id: int) -> Optional[dict]:
        record = self._payrolls.get_for_user_and_month(user_id, self.current_month())
        if not record:
            return None
        return {"month": record.month, "netSalary": money(record.net_salary), "status": record.status.value}

    def month_summary(self) -> list:
        return [
            {"status": status.value, "count": t.count, "total": money(t.total)}
            for status, t in self._payrolls.totals_by_status(self.current_month())
        ]

    def report(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        department: Optional[str] = None,
    ) -> dict:
        department = (department or "").strip() or None
        rows, _ = self._payrolls.search(department=department, created_from=start_date, created_to=end_date)
        totals = self._payrolls.totals(department=department, created_from=start_date, created_to=end_date)
        return {
            "data": [r.to_dict() for r in rows],
            "summary": {
                "totalEmployees": totals.count,
                "totalPayroll": money(totals.total),
                "avgSalary": money(totals.average.quantize(Decimal("0.01"))),
            },
        }
