from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal
from typing import Any, Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .auth.guards import Guards
from .auth.service import AuthService
from .auth.tokens import TokenService
from .common.datetime_utils import Clock, SystemClock
from .core.constants import (
    ANNUAL_LEAVE_ALLOWANCE,
    DEFAULT_ACCESS_TOKEN_MINUTES,
    DEFAULT_PAYMENT_METHOD,
    DEFAULT_REFRESH_TOKEN_DAYS,
    DEFAULT_TAX_RATE,
)
from .dashboard.service import DashboardService
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeService
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.repository import LeaveRepository
from .leaves.service import LeaveService
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.repository import NotificationRepository
from .notifications.service import NotificationService
from .payroll.calculator.flat_rate_calculator import FlatRateTaxCalculator
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.repository import PayrollRepository
from .payroll.service import PayrollService


@dataclass(frozen=True)
class Container:
    clock: Clock

    employees_repo: EmployeeRepository
    attendance_repo: AttendanceRepository
    leaves_repo: LeaveRepository
    payroll_repo: PayrollRepository
    notifications_repo: NotificationRepository

    tokens: TokenService
    auth_service: AuthService
    guards: Guards
    employee_service: EmployeeService
    attendance_service: AttendanceService
    notification_service: NotificationService
    leave_service: LeaveService
    payroll_service: PayrollService
    dashboard_service: DashboardService

    conn: Optional[DatabaseConnection] = None


def wire(
    *,
    employees_repo: EmployeeRepository,
    attendance_repo: AttendanceRepository,
    leaves_repo: LeaveRepository,
    payroll_repo: PayrollRepository,
    notifications_repo: NotificationRepository,
    jwt_secret: str,
    jwt_refresh_secret: str,
    access_minutes: int = DEFAULT_ACCESS_TOKEN_MINUTES,
    refresh_days: int = DEFAULT_REFRESH_TOKEN_DAYS,
    annual_leave_allowance: int = ANNUAL_LEAVE_ALLOWANCE,
    tax_rate: Decimal = DEFAULT_TAX_RATE,
    default_payment_method: str = DEFAULT_PAYMENT_METHOD,
    company_name: str = "DayFlow Inc.",
    company_address: str = "",
    clock: Optional[Clock] = None,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Build services on top of any repository implementations."""
    clock = clock or SystemClock()

    tokens = TokenService(
        secret=jwt_secret,
        refresh_secret=jwt_refresh_secret,
        access_ttl=timedelta(minutes=access_minutes),
        refresh_ttl=timedelta(days=refresh_days),
        clock=clock,
    )
    employee_service = EmployeeService(employees_repo)
    auth_service = AuthService(employees_repo, employee_service, tokens)
    attendance_service = AttendanceService(attendance_repo, employees_repo, clock=clock)
    notification_service = NotificationService(notifications_repo, clock=clock)
    leave_service = LeaveService(
        leaves_repo,
        attendance_service,
        notification_service,
        clock=clock,
        annual_allowance=annual_leave_allowance,
    )
    payroll_service = PayrollService(
        payroll_repo,
        employees_repo,
        calculator=FlatRateTaxCalculator(tax_rate),
        clock=clock,
        default_payment_method=default_payment_method,
        company_name=company_name,
        company_address=company_address,
    )
    dashboard_service = DashboardService(
        employees_repo,
        attendance_service,
        leave_service,
        payroll_service,
        notification_service,
        clock=clock,
    )

    return Container(
        clock=clock,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        leaves_repo=leaves_repo,
        payroll_repo=payroll_repo,
        notifications_repo=notifications_repo,
        tokens=tokens,
        auth_service=auth_service,
        guards=Guards(auth_service),
        employee_service=employee_service,
        attendance_service=attendance_service,
        notification_service=notification_service,
        leave_service=leave_service,
        payroll_service=payroll_service,
        dashboard_service=dashboard_service,
        conn=conn,
    )


def build_container(settings: Any) -> Container:
    """Production wiring: MySQL repositories configured from a settings module."""
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(getattr(settings, "DB_CONFIG")))

    return wire(
        employees_repo=MySQLEmployeeRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        leaves_repo=MySQLLeaveRepository(conn),
        payroll_repo=MySQLPayrollRepository(conn),
        notifications_repo=MySQLNotificationRepository(conn),
        jwt_secret=str(getattr(settings, "JWT_SECRET")),
        jwt_refresh_secret=str(getattr(settings, "JWT_REFRESH_SECRET")),
        access_minutes=int(getattr(settings, "JWT_ACCESS_MINUTES", DEFAULT_ACCESS_TOKEN_MINUTES)),
        refresh_days=int(getattr(settings, "JWT_REFRESH_DAYS", DEFAULT_REFRESH_TOKEN_DAYS)),
        annual_leave_allowance=int(getattr(settings, "ANNUAL_LEAVE_ALLOWANCE", ANNUAL_LEAVE_ALLOWANCE)),
        tax_rate=Decimal(str(getattr(settings, "TAX_RATE", DEFAULT_TAX_RATE))),
        default_payment_method=str(getattr(settings, "DEFAULT_PAYMENT_METHOD", DEFAULT_PAYMENT_METHOD)),
        company_name=str(getattr(settings, "COMPANY_NAME", "DayFlow Inc.")),
        company_address=str(getattr(settings, "COMPANY_ADDRESS", "")),
        conn=conn,
    )
