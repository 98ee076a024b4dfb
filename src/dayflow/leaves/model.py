from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Union

from ..common.datetime_utils import iso
from ..core.enums import LeaveStatus, LeaveType


@dataclass(frozen=True)
class LeaveRequest:
    """Domain entity: a leave request.

    Pending until one decision is made; Approved and Rejected are terminal.
    ``decided_by``/``decided_at`` are set only by that decision.
    """

    request_id: int
    user_id: int
    employee_id: str
    employee_name: str
    leave_type: LeaveType
    start_date: date
    end_date: date
    days: float
    reason: str
    status: LeaveStatus
    applied_at: datetime
    decided_by: Optional[int] = None
    decided_at: Optional[datetime] = None
    remarks: Optional[str] = None

    @property
    def is_pending(self) -> bool:
        return self.status == LeaveStatus.PENDING

    def to_dict(self) -> dict:
        return {
            "id": self.request_id,
            "userId": self.user_id,
            "employeeId": self.employee_id,
            "employeeName": self.employee_name,
            "leaveType": self.leave_type.value,
            "startDate": iso(self.start_date),
            "endDate": iso(self.end_date),
            "days": float(self.days),
            "reason": self.reason,
            "status": self.status.value,
            "appliedDate": iso(self.applied_at),
            "approvedBy": self.decided_by,
            "approvedDate": iso(self.decided_at),
            "remarks": self.remarks,
        }


@dataclass(frozen=True)
class NewLeaveRequest:
    user_id: int
    employee_id: str
    employee_name: str
    leave_type: LeaveType
    start_date: date
    end_date: date
    days: float
    reason: str
    applied_at: datetime


@dataclass(frozen=True)
class LeaveTotals:
    """Read-model: count and summed days for one group (status, type or month)."""

    key: Union[str, int]
    count: int
    total_days: float

    def to_dict(self, key_name: str) -> dict:
        return {key_name: self.key, "count": self.count, "totalDays": float(self.total_days)}
