from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence, Tuple

from ..core.enums import PayrollStatus
from .model import PayrollAmounts, PayrollRecord, PayrollTotals


class PayrollRepository(Protocol):
    def get_by_id(self, payroll_id: int) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def get_for_user_and_month(self, user_id: int, month: str) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def create(
        self,
        *,
        user_id: int,
        employee_id: str,
        employee_name: str,
        month: str,
        amounts: PayrollAmounts,
        created_at: datetime,
    ) -> int:
        """Raises ConflictError when (user, month) already has a record."""
        raise NotImplementedError

    def update_amounts(self, payroll_id: int, amounts: PayrollAmounts, *, updated_at: datetime) -> bool:
        """False when the record is already Paid."""
        raise NotImplementedError

    def mark_paid(self, payroll_id: int, *, payment_date: datetime, payment_method: str) -> bool:
        """False when the record is already Paid."""
        raise NotImplementedError

    def search(
        self,
        *,
        user_id: Optional[int] = None,
        employee_id: Optional[str] = None,
        month: Optional[str] = None,
        status: Optional[PayrollStatus] = None,
        department: Optional[str] = None,
        created_from: Optional[date] = None,
        created_to: Optional[date] = None,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> Tuple[Sequence[PayrollRecord], int]:
        """Newest first; returns (page, total matching)."""
        raise NotImplementedError

    def totals(
        self,
        *,
        employee_id: Optional[str] = None,
        month: Optional[str] = None,
        status: Optional[PayrollStatus] = None,
        department: Optional[str] = None,
        created_from: Optional[date] = None,
        created_to: Optional[date] = None,
    ) -> PayrollTotals:
        """Count and summed net salary over the filter."""
        raise NotImplementedError

    def totals_by_status(self, month: str) -> Sequence[Tuple[PayrollStatus, PayrollTotals]]:
        raise NotImplementedError
