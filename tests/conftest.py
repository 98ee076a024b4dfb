from __future__ import annotations

from collections import Counter, defaultdict
from dataclasses import replace
from datetime import date, datetime, timedelta
from decimal import Decimal
from types import SimpleNamespace
from typing import Optional

import pytest

from dayflow.attendance.model import AttendanceRecord, StatusCount, TrendPoint
from dayflow.container import wire
from dayflow.core.enums import EmploymentStatus, LeaveStatus, PayrollStatus, Role
from dayflow.core.exceptions import ConflictError
from dayflow.employees.model import Employee
from dayflow.leaves.model import LeaveRequest, LeaveTotals
from dayflow.main import create_app
from dayflow.notifications.model import Notification
from dayflow.payroll.model import ZERO, PayrollRecord, PayrollTotals

JWT_SECRET = "test-jwt-secret"
JWT_REFRESH_SECRET = "test-jwt-refresh-secret"


def _page(rows: list, offset: int, limit: Optional[int]):
    total = len(rows)
    if limit is None:
        return rows[offset:], total
    return rows[offset : offset + limit], total


class FixedClock:
    def __init__(self, now: datetime):
        self._now = now

    def now(self) -> datetime:
        return self._now

    def today(self) -> date:
        return self._now.date()

    def set(self, value: datetime) -> None:
        self._now = value

    def advance(self, **kwargs) -> None:
        self._now += timedelta(**kwargs)


class InMemoryEmployees:
    def __init__(self, clock: FixedClock):
        self._clock = clock
        self._rows: dict[int, Employee] = {}
        self._next_id = 0

    def get_by_id(self, user_id):
        return self._rows.get(int(user_id))

    def get_by_employee_id(self, employee_id):
        return next((e for e in self._rows.values() if e.employee_id == employee_id.upper()), None)

    def get_by_email(self, email):
        return next((e for e in self._rows.values() if e.email == email.lower()), None)

    def find_conflict(self, *, email, employee_id):
        return self.get_by_email(email) or self.get_by_employee_id(employee_id)

    def create(self, new):
        if self.find_conflict(email=new.email, employee_id=new.employee_id):
            raise ConflictError("Employee with this email or employee ID already exists")
        self._next_id += 1
        now = self._clock.now()
        self._rows[self._next_id] = Employee(
            user_id=self._next_id,
            employee_id=new.employee_id,
            name=new.name,
            email=new.email,
            password_hash=new.password_hash,
            role=new.role,
            department=new.department,
            position=new.position,
            salary=new.salary,
            phone=new.phone,
            address=new.address,
            join_date=new.join_date or now.date(),
            created_at=now,
            updated_at=now,
        )
        return self._next_id

    def update_fields(self, user_id, fields):
        current = self._rows.get(int(user_id))
        if current is None:
            return False
        self._rows[current.user_id] = replace(current, **fields)
        return True

    def set_refresh_token(self, user_id, token):
        return self.update_fields(user_id, {"refresh_token": token})

    def search(self, *, search=None, department=None, status=None, offset=0, limit=None):
        rows = list(self._rows.values())
        if search:
            needle = search.lower()
            rows = [
                e
                for e in rows
                if needle in e.name.lower() or needle in e.email.lower() or needle in e.employee_id.lower()
            ]
        if department:
            rows = [e for e in rows if e.department == department]
        if status is not None:
            rows = [e for e in rows if e.status == status]
        rows.sort(key=lambda e: e.user_id, reverse=True)
        return _page(rows, offset, limit)

    def count_by_status(self):
        return dict(Counter(e.status.value for e in self._rows.values()))

    def department_headcount(self):
        counts = Counter(e.department for e in self._rows.values() if e.status == EmploymentStatus.ACTIVE)
        return [{"department": d, "count": n} for d, n in counts.most_common()]


class InMemoryAttendance:
    def __init__(self):
        self._rows: dict[tuple[int, date], AttendanceRecord] = {}
        self._next_id = 0

    def _by_id(self, attendance_id):
        return next((r for r in self._rows.values() if r.attendance_id == attendance_id), None)

    def _put(self, record):
        self._rows[(record.user_id, record.work_date)] = record

    def _insert(self, **fields):
        self._next_id += 1
        record = AttendanceRecord(attendance_id=self._next_id, **fields)
        self._put(record)
        return record.attendance_id

    def get_for_user_and_date(self, user_id, work_date):
        return self._rows.get((user_id, work_date))

    def create_checkin(
        self, *, user_id, employee_id, employee_name, work_date, check_in_time, status, location=None
    ):
        if (user_id, work_date) in self._rows:
            raise ConflictError("Already checked in today")
        return self._insert(
            user_id=user_id,
            employee_id=employee_id,
            employee_name=employee_name,
            work_date=work_date,
            status=status,
            check_in_time=check_in_time,
            check_in_location=location,
        )

    def update_checkin(self, *, attendance_id, check_in_time, status, location=None):
        record = self._by_id(attendance_id)
        if record is None or record.checked_in:
            return False
        self._put(replace(record, check_in_time=check_in_time, status=status, check_in_location=location))
        return True

    def update_checkout(self, *, attendance_id, check_out_time, hours, status, location=None):
        record = self._by_id(attendance_id)
        if record is None or record.checked_out:
            return False
        self._put(
            replace(record, check_out_time=check_out_time, hours=hours, status=status, check_out_location=location)
        )
        return True

    def set_day_status(self, *, user_id, employee_id, employee_name, work_date, status, remarks=None):
        record = self._rows.get((user_id, work_date))
        if record is not None:
            self._put(replace(record, status=status, remarks=remarks))
            return
        self._insert(
            user_id=user_id,
            employee_id=employee_id,
            employee_name=employee_name,
            work_date=work_date,
            status=status,
            remarks=remarks,
        )

    def _filter(self, *, user_id=None, employee_id=None, status=None, start_date=None, end_date=None):
        rows = list(self._rows.values())
        if user_id is not None:
            rows = [r for r in rows if r.user_id == user_id]
        if employee_id:
            rows = [r for r in rows if r.employee_id == employee_id]
        if status is not None:
            rows = [r for r in rows if r.status == status]
        if start_date:
            rows = [r for r in rows if r.work_date >= start_date]
        if end_date:
            rows = [r for r in rows if r.work_date <= end_date]
        return rows

    def search(
        self, *, user_id=None, employee_id=None, status=None, start_date=None, end_date=None, offset=0, limit=None
    ):
        rows = self._filter(
            user_id=user_id, employee_id=employee_id, status=status, start_date=start_date, end_date=end_date
        )
        rows.sort(key=lambda r: (r.work_date, r.attendance_id), reverse=True)
        return _page(rows, offset, limit)

    def status_summary(self, *, user_id=None, employee_id=None, start_date=None, end_date=None):
        grouped = defaultdict(list)
        for r in self._filter(user_id=user_id, employee_id=employee_id, start_date=start_date, end_date=end_date):
            grouped[r.status].append(r)
        return [
            StatusCount(status=s, count=len(rs), total_hours=sum(r.hours for r in rs)) for s, rs in grouped.items()
        ]

    def list_for_date(self, work_date):
        rows = [r for r in self._rows.values() if r.work_date == work_date]
        rows.sort(key=lambda r: r.check_in_time or datetime.min, reverse=True)
        return rows

    def monthly_trend(self, since):
        counts = Counter(
            (r.work_date.year, r.work_date.month, r.status) for r in self._rows.values() if r.work_date >= since
        )
        return [TrendPoint(year=y, month=m, status=s, count=n) for (y, m, s), n in sorted(counts.items())]


class InMemoryLeaves:
    def __init__(self):
        self._rows: dict[int, LeaveRequest] = {}
        self._next_id = 0

    def create(self, new):
        self._next_id += 1
        self._rows[self._next_id] = LeaveRequest(
            request_id=self._next_id,
            user_id=new.user_id,
            employee_id=new.employee_id,
            employee_name=new.employee_name,
            leave_type=new.leave_type,
            start_date=new.start_date,
            end_date=new.end_date,
            days=new.days,
            reason=new.reason,
            status=LeaveStatus.PENDING,
            applied_at=new.applied_at,
        )
        return self._next_id

    def get_by_id(self, request_id):
        return self._rows.get(int(request_id))

    def _filter(self, *, user_id=None, employee_id=None, status=None, applied_from=None, applied_to=None):
        rows = list(self._rows.values())
        if user_id is not None:
            rows = [r for r in rows if r.user_id == user_id]
        if employee_id:
            rows = [r for r in rows if r.employee_id == employee_id]
        if status is not None:
            rows = [r for r in rows if r.status == status]
        if applied_from:
            rows = [r for r in rows if r.applied_at.date() >= applied_from]
        if applied_to:
            rows = [r for r in rows if r.applied_at.date() <= applied_to]
        return rows

    def search(
        self, *, user_id=None, employee_id=None, status=None, applied_from=None, applied_to=None, offset=0, limit=None
    ):
        rows = self._filter(
            user_id=user_id, employee_id=employee_id, status=status, applied_from=applied_from, applied_to=applied_to
        )
        rows.sort(key=lambda r: (r.applied_at, r.request_id), reverse=True)
        return _page(rows, offset, limit)

    def decide(self, request_id, *, status, decided_by, decided_at, remarks=None):
        leave = self._rows.get(int(request_id))
        if leave is None or not leave.is_pending:
            return False
        self._rows[leave.request_id] = replace(
            leave, status=status, decided_by=decided_by, decided_at=decided_at, remarks=remarks
        )
        return True

    def delete_pending(self, request_id):
        leave = self._rows.get(int(request_id))
        if leave is None or not leave.is_pending:
            return False
        del self._rows[leave.request_id]
        return True

    @staticmethod
    def _totals(rows, key):
        grouped = defaultdict(list)
        for r in rows:
            grouped[key(r)].append(r)
        return [LeaveTotals(key=k, count=len(rs), total_days=sum(r.days for r in rs)) for k, rs in grouped.items()]

    def totals_by_status(self):
        return self._totals(self._rows.values(), lambda r: r.status.value)

    def totals_by_type(self, *, status=None, employee_id=None, applied_from=None, applied_to=None):
        rows = self._filter(employee_id=employee_id, status=status, applied_from=applied_from, applied_to=applied_to)
        return self._totals(rows, lambda r: r.leave_type.value)

    def approved_totals_by_month(self, *, since):
        rows = [r for r in self._rows.values() if r.status == LeaveStatus.APPROVED and r.start_date >= since]
        return sorted(self._totals(rows, lambda r: r.start_date.month), key=lambda t: t.key)

    def approved_days(self, user_id, *, since):
        return float(
            sum(
                r.days
                for r in self._rows.values()
                if r.user_id == user_id and r.status == LeaveStatus.APPROVED and r.start_date >= since
            )
        )

    def count_pending(self, user_id=None):
        return sum(1 for r in self._rows.values() if r.is_pending and (user_id is None or r.user_id == user_id))


class InMemoryPayroll:
    def __init__(self, employees: InMemoryEmployees):
        self._employees = employees
        self._rows: dict[int, PayrollRecord] = {}
        self._next_id = 0

    def _department_of(self, user_id):
        employee = self._employees.get_by_id(user_id)
        return employee.department if employee else None

    def get_by_id(self, payroll_id):
        return self._rows.get(int(payroll_id))

    def get_for_user_and_month(self, user_id, month):
        return next((r for r in self._rows.values() if r.user_id == user_id and r.month == month), None)

    def create(self, *, user_id, employee_id, employee_name, month, amounts, created_at):
        if self.get_for_user_and_month(user_id, month):
            raise ConflictError("Payroll for this month already exists")
        self._next_id += 1
        self._rows[self._next_id] = PayrollRecord(
            payroll_id=self._next_id,
            user_id=user_id,
            employee_id=employee_id,
            employee_name=employee_name,
            month=month,
            base_salary=amounts.base_salary,
            allowances=amounts.allowances,
            deductions=amounts.deductions,
            bonus=amounts.bonus,
            tax=amounts.tax,
            net_salary=amounts.net_salary,
            status=PayrollStatus.PENDING,
            breakdown=amounts.breakdown,
            remarks=amounts.remarks,
            created_at=created_at,
            updated_at=created_at,
        )
        return self._next_id

    def update_amounts(self, payroll_id, amounts, *, updated_at):
        record = self._rows.get(int(payroll_id))
        if record is None or record.is_paid:
            return False
        self._rows[record.payroll_id] = replace(
            record,
            base_salary=amounts.base_salary,
            allowances=amounts.allowances,
            deductions=amounts.deductions,
            bonus=amounts.bonus,
            tax=amounts.tax,
            net_salary=amounts.net_salary,
            breakdown=amounts.breakdown,
            remarks=amounts.remarks,
            updated_at=updated_at,
        )
        return True

    def mark_paid(self, payroll_id, *, payment_date, payment_method):
        record = self._rows.get(int(payroll_id))
        if record is None or record.is_paid:
            return False
        self._rows[record.payroll_id] = replace(
            record, status=PayrollStatus.PAID, payment_date=payment_date, payment_method=payment_method
        )
        return True

    def _filter(
        self,
        *,
        user_id=None,
        employee_id=None,
        month=None,
        status=None,
        department=None,
        created_from=None,
        created_to=None,
    ):
        rows = list(self._rows.values())
        if user_id is not None:
            rows = [r for r in rows if r.user_id == user_id]
        if employee_id:
            rows = [r for r in rows if r.employee_id == employee_id]
        if month:
            rows = [r for r in rows if r.month == month]
        if status is not None:
            rows = [r for r in rows if r.status == status]
        if department:
            rows = [r for r in rows if self._department_of(r.user_id) == department]
        if created_from:
            rows = [r for r in rows if r.created_at.date() >= created_from]
        if created_to:
            rows = [r for r in rows if r.created_at.date() <= created_to]
        return rows

    def search(self, *, offset=0, limit=None, **filters):
        rows = self._filter(**filters)
        rows.sort(key=lambda r: (r.created_at, r.payroll_id), reverse=True)
        return _page(rows, offset, limit)

    def totals(self, **filters):
        rows = self._filter(**filters)
        return PayrollTotals(count=len(rows), total=sum((r.net_salary for r in rows), ZERO))

    def totals_by_status(self, month):
        grouped = defaultdict(list)
        for r in self._filter(month=month):
            grouped[r.status].append(r)
        return [
            (s, PayrollTotals(count=len(rs), total=sum((r.net_salary for r in rs), ZERO))) for s, rs in grouped.items()
        ]


class InMemoryNotifications:
    def __init__(self):
        self._rows: dict[int, Notification] = {}
        self._next_id = 0

    def create(self, *, user_id, title, message, type, created_at, link=None):
        self._next_id += 1
        self._rows[self._next_id] = Notification(
            notification_id=self._next_id,
            user_id=user_id,
            title=title,
            message=message,
            type=type,
            read=False,
            created_at=created_at,
            link=link,
        )
        return self._next_id

    def list_for_user(self, user_id, *, unread_only=False, limit=20):
        rows = [n for n in self._rows.values() if n.user_id == user_id and not (unread_only and n.read)]
        rows.sort(key=lambda n: n.notification_id, reverse=True)
        return rows[:limit]

    def mark_read(self, notification_id, user_id):
        item = self._rows.get(int(notification_id))
        if item is None or item.user_id != user_id:
            return False
        self._rows[item.notification_id] = replace(item, read=True)
        return True


@pytest.fixture
def clock():
    return FixedClock(datetime(2026, 1, 15, 9, 0))


@pytest.fixture
def repos(clock):
    employees = InMemoryEmployees(clock)
    return SimpleNamespace(
        employees=employees,
        attendance=InMemoryAttendance(),
        leaves=InMemoryLeaves(),
        payroll=InMemoryPayroll(employees),
        notifications=InMemoryNotifications(),
    )


@pytest.fixture
def container(repos, clock):
    return wire(
        employees_repo=repos.employees,
        attendance_repo=repos.attendance,
        leaves_repo=repos.leaves,
        payroll_repo=repos.payroll,
        notifications_repo=repos.notifications,
        jwt_secret=JWT_SECRET,
        jwt_refresh_secret=JWT_REFRESH_SECRET,
        tax_rate=Decimal("0.10"),
        company_name="DayFlow Inc.",
        company_address="1 Test Street",
        clock=clock,
    )


@pytest.fixture
def app(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_employee(container):
    def _make(
        employee_id: str,
        *,
        role: Role = Role.EMPLOYEE,
        name: Optional[str] = None,
        email: Optional[str] = None,
        password: str = "secret123",
        department: str = "Engineering",
        position: str = "Developer",
    ) -> Employee:
        return container.employee_service.create_account(
            employee_id=employee_id,
            name=name or f"Employee {employee_id}",
            email=email or f"{employee_id.lower()}@dayflow.test",
            password=password,
            role=role,
            department=department,
            position=position,
        )

    return _make


@pytest.fixture
def auth_header(container):
    def _header(employee: Employee) -> dict:
        return {"Authorization": f"Bearer {container.tokens.issue_access(employee.user_id)}"}

    return _header


@pytest.fixture
def employee(make_employee):
    return make_employee("EMP100", name="Alex Doe")


@pytest.fixture
def hr(make_employee):
    return make_employee("HR001", role=Role.HR, name="Dana HR", department="HR", position="HR Lead")


@pytest.fixture
def manager(make_employee):
    return make_employee("MGR001", role=Role.MANAGER, name="Sam Manager", position="Engineering Manager")
