from __future__ import annotations

from typing import Optional

from ..attendance.service import AttendanceService
from ..common.datetime_utils import Clock, SystemClock, months_back, parse_date_arg, start_of_month
from ..core.constants import ATTENDANCE_TREND_MONTHS, RECENT_LEAVES_LIMIT, RECENT_NOTIFICATIONS_LIMIT
from ..core.enums import AttendanceStatus, EmploymentStatus
from ..core.exceptions import ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..leaves.service import LeaveService
from ..notifications.service import NotificationService
from ..payroll.service import PayrollService

REPORT_TYPES = ("attendance", "leave", "payroll", "employee")

# Flat columns used when a report is exported as CSV.
REPORT_COLUMNS = {
    "attendance": ["date", "employeeId", "employeeName", "status", "checkIn", "checkOut", "hours", "remarks"],
    "leave": [
        "employeeId",
        "employeeName",
        "leaveType",
        "startDate",
        "endDate",
        "days",
        "status",
        "appliedDate",
        "reason",
    ],
    "payroll": [
        "month",
        "employeeId",
        "employeeName",
        "baseSalary",
        "allowances",
        "bonus",
        "deductions",
        "tax",
        "netSalary",
        "status",
        "paymentDate",
    ],
    "employee": ["employeeId", "name", "email", "role", "department", "position", "status", "joinDate"],
}


class DashboardService:
    """Read-only projections over all ledgers: dashboards and reports."""

    def __init__(
        self,
        employees: EmployeeRepository,
        attendance: AttendanceService,
        leaves: LeaveService,
        payroll: PayrollService,
        notifications: NotificationService,
        *,
        clock: Clock | None = None,
    ):
        self._employees = employees
        self._attendance = attendance
        self._leaves = leaves
        self._payroll = payroll
        self._notifications = notifications
        self._clock = clock or SystemClock()

    def employee_dashboard(self, employee: Employee) -> dict:
        today = self._attendance.my_today(employee)
        month_stats = self._attendance.status_counts(employee.user_id, since=start_of_month(self._clock.today()))
        balance = self._leaves.balance(employee.user_id)
        balance["pending"] = self._leaves.pending_count(employee.user_id)
        notifications = self._notifications.recent(employee.user_id, RECENT_NOTIFICATIONS_LIMIT)
        return {
            "user": {
                "name": employee.name,
                "employeeId": employee.employee_id,
                "department": employee.department,
                "position": employee.position,
                "email": employee.email,
                "avatar": employee.avatar,
            },
            "todayAttendance": today.to_dict() if today else None,
            "stats": {
                "attendance": month_stats,
                "leaves": balance,
                "payroll": self._payroll.current_summary(employee.user_id),
            },
            "notifications": [n.to_dict() for n in notifications],
        }

    def admin_dashboard(self) -> dict:
        counts = self._employees.count_by_status()
        active = counts.get(EmploymentStatus.ACTIVE.value, 0)

        today = self._attendance.today_overview()["attendance"]
        present = sum(1 for r in today if r["status"] == AttendanceStatus.PRESENT.value)
        on_leave = sum(1 for r in today if r["status"] == AttendanceStatus.LEAVE.value)

        since = months_back(self._clock.today(), ATTENDANCE_TREND_MONTHS)
        return {
            "employees": {
                "total": sum(counts.values()),
                "active": active,
                "onLeave": counts.get(EmploymentStatus.ON_LEAVE.value, 0),
            },
            "attendance": {
                "today": {
                    "total": active,
                    "present": present,
                    # half-days count as absent here, unlike /attendance/today
                    "absent": active - present - on_leave,
                    "leave": on_leave,
                },
                "trend": self._attendance.trend(since),
            },
            "leaves": {
                "pending": self._leaves.pending_count(),
                "recent": self._leaves.recent(RECENT_LEAVES_LIMIT),
            },
            "departments": list(self._employees.department_headcount()),
            "payroll": self._payroll.month_summary(),
        }

    def report(
        self,
        report_type: Optional[str],
        *,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        employee_id: Optional[str] = None,
        department: Optional[str] = None,
    ) -> dict:
        if report_type not in REPORT_TYPES:
            raise ValidationError("Invalid report type")
        start = parse_date_arg(start_date, "startDate")
        end = parse_date_arg(end_date, "endDate")
        period = {"startDate": start_date or None, "endDate": end_date or None}

        if report_type == "attendance":
            body = self._attendance.report(start_date=start, end_date=end, employee_id=employee_id)
        elif report_type == "leave":
            body = self._leaves.report(start_date=start, end_date=end, employee_id=employee_id)
        elif report_type == "payroll":
            body = self._payroll.report(start_date=start, end_date=end, department=department)
            body["department"] = department or None
        else:
            return {"type": "employee", "department": department or None, **self._employee_report(department)}
        return {"type": report_type, "period": period, **body}

    def _employee_report(self, department: Optional[str]) -> dict:
        rows, _ = self._employees.search(department=(department or "").strip() or None)

        def count(status: EmploymentStatus) -> int:
            return sum(1 for e in rows if e.status == status)

        return {
            "data": [e.to_dict() for e in rows],
            "summary": {
                "total": len(rows),
                "active": count(EmploymentStatus.ACTIVE),
                "inactive": count(EmploymentStatus.INACTIVE),
                "onLeave": count(EmploymentStatus.ON_LEAVE),
            },
        }
