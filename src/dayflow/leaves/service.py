from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, Optional

from ..attendance.service import AttendanceService
from ..common.datetime_utils import Clock, SystemClock, inclusive_days, iter_days, parse_date_arg, start_of_year
from ..common.pagination import PageRequest
from ..common.validators import optional_choice, optional_str, require_choice, require_min_length
from ..core.constants import ANNUAL_LEAVE_ALLOWANCE, MIN_LEAVE_REASON_LENGTH
from ..core.enums import AttendanceStatus, LeaveStatus, LeaveType, NotificationType
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..employees.model import Employee
from ..notifications.service import NotificationService
from .model import LeaveRequest, NewLeaveRequest
from .repository import LeaveRepository

logger = logging.getLogger(__name__)

# Targets allowed for a decision; Pending is never a valid target.
DECISIONS = frozenset({LeaveStatus.APPROVED, LeaveStatus.REJECTED})


class LeaveService:
    """Use case: leave requests and their one-shot approval.

    Approval writes every day of the request into the attendance ledger as
    Leave. The decision is stored first; each day is then upserted on its
    own, so a storage failure part-way leaves the earlier days written and
    the later ones untouched (logged, surfaced as an error, not retried).
    """

    def __init__(
        self,
        leaves: LeaveRepository,
        attendance: AttendanceService,
        notifications: NotificationService,
        *,
        clock: Clock | None = None,
        annual_allowance: int = ANNUAL_LEAVE_ALLOWANCE,
    ):
        self._leaves = leaves
        self._attendance = attendance
        self._notifications = notifications
        self._clock = clock or SystemClock()
        self._allowance = int(annual_allowance)

    def _get(self, request_id: int) -> LeaveRequest:
        leave = self._leaves.get_by_id(int(request_id))
        if not leave:
            raise NotFoundError("Leave request not found")
        return leave

    def create(self, employee: Employee, payload: Dict[str, Any]) -> LeaveRequest:
        leave_type = require_choice(payload.get("leaveType"), LeaveType, "Leave type")
        start = parse_date_arg(payload.get("startDate"), "startDate")
        end = parse_date_arg(payload.get("endDate"), "endDate")
        if start is None or end is None:
            raise ValidationError("Start date and end date are required")
        if end < start:
            raise ValidationError("End date must be after start date")
        reason = require_min_length(payload.get("reason"), "Reason", MIN_LEAVE_REASON_LENGTH)

        days = inclusive_days(start, end)
        request_id = self._leaves.create(
            NewLeaveRequest(
                user_id=employee.user_id,
                employee_id=employee.employee_id,
                employee_name=employee.name,
                leave_type=leave_type,
                start_date=start,
                end_date=end,
                days=days,
                reason=reason,
                applied_at=self._clock.now(),
            )
        )
        # only the requester is notified; approvers see it in the pending list
        self._notifications.notify(
            employee.user_id,
            title="Leave Request Submitted",
            message=f"Your leave request for {days} day(s) has been submitted",
            type=NotificationType.INFO,
        )
        logger.info("Leave request %s created by %s for %s day(s)", request_id, employee.employee_id, days)
        return self._get(request_id)

    def balance(self, user_id: int) -> dict:
        """Annual allowance minus approved days starting this calendar year."""
        used = self._leaves.approved_days(user_id, since=start_of_year(self._clock.today()))
        return {"total": self._allowance, "used": used, "remaining": self._allowance - used}

    def my_leaves(self, employee: Employee, *, page: PageRequest, status: Optional[str] = None) -> dict:
        rows, total = self._leaves.search(
            user_id=employee.user_id,
            status=optional_choice(status, LeaveStatus, "status"),
            offset=page.offset,
            limit=page.limit,
        )
        return {
            "leaves": [r.to_dict() for r in rows],
            "balance": self.balance(employee.user_id),
            "pagination": page.describe(total),
        }

    def all_leaves(
        self,
        *,
        page: PageRequest,
        status: Optional[str] = None,
        employee_id: Optional[str] = None,
    ) -> dict:
        rows, total = self._leaves.search(
            status=optional_choice(status, LeaveStatus, "status"),
            employee_id=(employee_id or "").strip().upper() or None,
            offset=page.offset,
            limit=page.limit,
        )
        return {
            "leaves": [r.to_dict() for r in rows],
            "stats": [t.to_dict("status") for t in self._leaves.totals_by_status()],
            "pagination": page.describe(total),
        }

    def stats(self) -> dict:
        by_type = self._leaves.totals_by_type(status=LeaveStatus.APPROVED)
        by_month = self._leaves.approved_totals_by_month(since=start_of_year(self._clock.today()))
        return {
            "leaveTypeStats": [t.to_dict("leaveType") for t in by_type],
            "monthlyStats": [t.to_dict("month") for t in by_month],
        }

    def decide(self, approver: Employee, request_id: int, payload: Dict[str, Any]) -> LeaveRequest:
        status = require_choice(payload.get("status"), LeaveStatus, "Status")
        if status not in DECISIONS:
            raise ValidationError("Status must be one of: Approved, Rejected")
        remarks = optional_str(payload.get("remarks"), "Remarks")

        leave = self._get(request_id)
        if not leave.is_pending:
            raise ConflictError("Leave request has already been processed")
        if not approver.role.can_approve:
            raise AuthorizationError("You do not have permission to perform this action")
        if not self._leaves.decide(
            leave.request_id,
            status=status,
            decided_by=approver.user_id,
            decided_at=self._clock.now(),
            remarks=remarks,
        ):
            # another approver got there first
            raise ConflictError("Leave request has already been processed")

        if status == LeaveStatus.APPROVED:
            self._sync_attendance(leave)

        self._notifications.notify(
            leave.user_id,
            title=f"Leave Request {status.value}",
            message=f"Your leave request has been {status.value.lower()}",
            type=NotificationType.SUCCESS if status == LeaveStatus.APPROVED else NotificationType.ERROR,
        )
        logger.info("Leave request %s %s by %s", leave.request_id, status.value.lower(), approver.employee_id)
        return self._get(leave.request_id)

    def _sync_attendance(self, leave: LeaveRequest) -> None:
        written: list[date] = []
        for day in iter_days(leave.start_date, leave.end_date):
            try:
                self._attendance.set_day_status(
                    user_id=leave.user_id,
                    employee_id=leave.employee_id,
                    employee_name=leave.employee_name,
                    work_date=day,
                    status=AttendanceStatus.LEAVE,
                    remarks=f"{leave.leave_type.value} leave",
                )
            except Exception:
                logger.exception(
                    "Attendance sync for leave request %s failed on %s; days already written: %s",
                    leave.request_id,
                    day.isoformat(),
                    ", ".join(d.isoformat() for d in written) or "none",
                )
                raise
            written.append(day)

    def delete(self, employee: Employee, request_id: int) -> None:
        leave = self._get(request_id)
        if not leave.is_pending:
            raise ConflictError("Only pending leave requests can be deleted")
        if leave.user_id != employee.user_id:
            raise AuthorizationError("You can only delete your own leave requests")
        if not self._leaves.delete_pending(leave.request_id):
            raise ConflictError("Only pending leave requests can be deleted")
        logger.info("Leave request %s deleted by %s", leave.request_id, employee.employee_id)

    def pending_count(self, user_id: Optional[int] = None) -> int:
        return self._leaves.count_pending(user_id)

    def recent(self, limit: int) -> list:
        rows, _ = self._leaves.search(offset=0, limit=limit)
        return [r.to_dict() for r in rows]

    def report(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        employee_id: Optional[str] = None,
    ) -> dict:
        employee_id = (employee_id or "").strip().upper() or None
        rows, _ = self._leaves.search(employee_id=employee_id, applied_from=start_date, applied_to=end_date)
        summary = self._leaves.totals_by_type(employee_id=employee_id, applied_from=start_date, applied_to=end_date)
        return {"data": [r.to_dict() for r in rows], "summary": [t.to_dict("leaveType") for t in summary]}
