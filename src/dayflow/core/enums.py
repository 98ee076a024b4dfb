from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Closed set of roles used for authorization."""

    EMPLOYEE = "employee"
    HR = "hr"
    MANAGER = "manager"

    @property
    def can_approve(self) -> bool:
        """HR and managers decide leave requests and see team-wide data."""
        return self in (Role.HR, Role.MANAGER)

    @property
    def can_administer_payroll(self) -> bool:
        return self is Role.HR


class EmploymentStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    ON_LEAVE = "on-leave"


class AttendanceStatus(str, Enum):
    """Status of one attendance day as stored in the database."""

    PRESENT = "Present"
    ABSENT = "Absent"
    LEAVE = "Leave"
    HALF_DAY = "Half-Day"


class LeaveType(str, Enum):
    PAID = "paid"
    SICK = "sick"
    UNPAID = "unpaid"
    CASUAL = "casual"


class LeaveStatus(str, Enum):
    """Leave approval workflow. Approved/Rejected are terminal."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class PayrollStatus(str, Enum):
    PENDING = "Pending"
    PAID = "Paid"
    FAILED = "Failed"


class NotificationType(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
