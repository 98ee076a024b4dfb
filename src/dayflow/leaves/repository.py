from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence, Tuple

from ..core.enums import LeaveStatus
from .model import LeaveRequest, LeaveTotals, NewLeaveRequest


class LeaveRepository(Protocol):
    def create(self, new: NewLeaveRequest) -> int:
        raise NotImplementedError

    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def search(
        self,
        *,
        user_id: Optional[int] = None,
        employee_id: Optional[str] = None,
        status: Optional[LeaveStatus] = None,
        applied_from: Optional[date] = None,
        applied_to: Optional[date] = None,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> Tuple[Sequence[LeaveRequest], int]:
        """Newest applied first; returns (page, total matching)."""
        raise NotImplementedError

    def decide(
        self,
        request_id: int,
        *,
        status: LeaveStatus,
        decided_by: int,
        decided_at: datetime,
        remarks: Optional[str] = None,
    ) -> bool:
        """Move a Pending request to ``status``; False if it was no longer Pending."""
        raise NotImplementedError

    def delete_pending(self, request_id: int) -> bool:
        raise NotImplementedError

    def totals_by_status(self) -> Sequence[LeaveTotals]:
        raise NotImplementedError

    def totals_by_type(
        self,
        *,
        status: Optional[LeaveStatus] = None,
        employee_id: Optional[str] = None,
        applied_from: Optional[date] = None,
        applied_to: Optional[date] = None,
    ) -> Sequence[LeaveTotals]:
        raise NotImplementedError

    def approved_totals_by_month(self, *, since: date) -> Sequence[LeaveTotals]:
        """Approved requests starting on/after ``since``, keyed by month number."""
        raise NotImplementedError

    def approved_days(self, user_id: int, *, since: date) -> float:
        raise NotImplementedError

    def count_pending(self, user_id: Optional[int] = None) -> int:
        raise NotImplementedError
