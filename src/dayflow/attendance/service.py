from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..common.datetime_utils import Clock, SystemClock, parse_date_arg, worked_hours
from ..common.pagination import PageRequest
from ..common.validators import optional_choice, optional_coordinate, optional_str
from ..core.enums import AttendanceStatus, EmploymentStatus
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from .model import AttendanceRecord, GeoPoint, StatusCount
from .repository import AttendanceRepository
from .strategies.base import AttendanceStrategy
from .strategies.worked_hours_strategy import WorkedHoursStrategy

logger = logging.getLogger(__name__)


def status_breakdown(summary: Sequence[StatusCount]) -> Dict[str, int]:
    counts = {s.status: s.count for s in summary}
    return {
        "present": counts.get(AttendanceStatus.PRESENT, 0),
        "absent": counts.get(AttendanceStatus.ABSENT, 0),
        "leave": counts.get(AttendanceStatus.LEAVE, 0),
        "halfDay": counts.get(AttendanceStatus.HALF_DAY, 0),
    }


def location_from(latitude: Any, longitude: Any) -> Optional[GeoPoint]:
    """Both coordinates or nothing."""
    lat = optional_coordinate(latitude, "Latitude")
    lng = optional_coordinate(longitude, "Longitude")
    if lat is None or lng is None:
        return None
    if not -90 <= lat <= 90 or not -180 <= lng <= 180:
        raise ValidationError("Coordinates are out of range")
    return GeoPoint(latitude=lat, longitude=lng)


class AttendanceService:
    """Use case: daily check-in/check-out and the attendance ledger.

    One record per (employee, day). Absence is never written eagerly; it is
    derived at read time from active head-count.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        *,
        clock: Clock | None = None,
        strategy: AttendanceStrategy | None = None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._clock = clock or SystemClock()
        self._strategy = strategy or WorkedHoursStrategy()

    def _today_record(self, employee: Employee) -> Optional[AttendanceRecord]:
        return self._attendance.get_for_user_and_date(employee.user_id, self._clock.today())

    def _reload(self, employee: Employee) -> AttendanceRecord:
        record = self._today_record(employee)
        if record is None:
            # the row was written a moment ago, so this is a storage fault
            raise RuntimeError(f"attendance row for {employee.employee_id} vanished after write")
        return record

    def check_in(self, employee: Employee, *, latitude: Any = None, longitude: Any = None) -> AttendanceRecord:
        location = location_from(latitude, longitude)
        now = self._clock.now()
        existing = self._today_record(employee)
        if existing and existing.checked_in:
            raise ConflictError("Already checked in today")

        decision = self._strategy.decide_checkin()
        if existing:
            # placeholder or leave row created earlier today: reuse it
            if not self._attendance.update_checkin(
                attendance_id=existing.attendance_id,
                check_in_time=now,
                status=decision.status,
                location=location,
            ):
                raise ConflictError("Already checked in today")
        else:
            self._attendance.create_checkin(
                user_id=employee.user_id,
                employee_id=employee.employee_id,
                employee_name=employee.name,
                work_date=now.date(),
                check_in_time=now,
                status=decision.status,
                location=location,
            )
        logger.info("Employee %s checked in at %s", employee.employee_id, now.isoformat())
        return self._reload(employee)

    def check_out(self, employee: Employee, *, latitude: Any = None, longitude: Any = None) -> AttendanceRecord:
        location = location_from(latitude, longitude)
        record = self._today_record(employee)
        if not record or not record.checked_in:
            raise ConflictError("Please check in first")
        if record.checked_out:
            raise ConflictError("Already checked out today")

        now = self._clock.now()
        hours = worked_hours(record.check_in_time, now)
        decision = self._strategy.decide_checkout(hours=hours, current=record.status)
        if not self._attendance.update_checkout(
            attendance_id=record.attendance_id,
            check_out_time=now,
            hours=hours,
            status=decision.status,
            location=location,
        ):
            raise ConflictError("Already checked out today")
        logger.info("Employee %s checked out after %.1f hours (%s)", employee.employee_id, hours, decision.status.value)
        return self._reload(employee)

    def my_today(self, employee: Employee) -> Optional[AttendanceRecord]:
        return self._today_record(employee)

    def my_attendance(
        self,
        employee: Employee,
        *,
        page: PageRequest,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> dict:
        start = parse_date_arg(start_date, "startDate")
        end = parse_date_arg(end_date, "endDate")
        rows, total = self._attendance.search(
            user_id=employee.user_id,
            start_date=start,
            end_date=end,
            offset=page.offset,
            limit=page.limit,
        )
        # stats cover every record of the employee, not just the filtered window
        summary = self._attendance.status_summary(user_id=employee.user_id)
        return {
            "attendance": [r.to_dict() for r in rows],
            "stats": status_breakdown(summary),
            "pagination": page.describe(total),
        }

    def all_attendance(
        self,
        *,
        page: PageRequest,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        employee_id: Optional[str] = None,
        status: Optional[str] = None,
    ) -> dict:
        rows, total = self._attendance.search(
            employee_id=(employee_id or "").strip().upper() or None,
            status=optional_choice(status, AttendanceStatus, "status"),
            start_date=parse_date_arg(start_date, "startDate"),
            end_date=parse_date_arg(end_date, "endDate"),
            offset=page.offset,
            limit=page.limit,
        )
        return {"attendance": [r.to_dict() for r in rows], "pagination": page.describe(total)}

    def today_overview(self) -> dict:
        records = self._attendance.list_for_date(self._clock.today())
        active = self._employees.count_by_status().get(EmploymentStatus.ACTIVE.value, 0)

        def count(status: AttendanceStatus) -> int:
            return sum(1 for r in records if r.status == status)

        stats = {
            "total": active,
            "present": count(AttendanceStatus.PRESENT),
            "leave": count(AttendanceStatus.LEAVE),
            "halfDay": count(AttendanceStatus.HALF_DAY),
        }
        stats["absent"] = stats["total"] - stats["present"] - stats["leave"] - stats["halfDay"]
        return {"attendance": [r.to_dict() for r in records], "stats": stats}

    def set_day_status(
        self,
        *,
        user_id: int,
        employee_id: str,
        employee_name: str,
        work_date: date,
        status: AttendanceStatus,
        remarks: Optional[str] = None,
    ) -> None:
        """Idempotent upsert of one (employee, day) to ``status``.

        Overwrites whatever the day held before, check-in included.
        """
        self._attendance.set_day_status(
            user_id=user_id,
            employee_id=employee_id,
            employee_name=employee_name,
            work_date=work_date,
            status=status,
            remarks=remarks,
        )

    def mark_leave(self, payload: Dict[str, Any]) -> None:
        user_id = payload.get("userId")
        if user_id is None or isinstance(user_id, bool):
            raise ValidationError("userId is required")
        try:
            user_id = int(user_id)
        except (TypeError, ValueError):
            raise ValidationError("userId must be an integer")
        day = parse_date_arg(payload.get("date"), "date")
        if day is None:
            raise ValidationError("date is required")
        remarks = optional_str(payload.get("remarks"), "Remarks")

        employee = self._employees.get_by_id(user_id)
        if not employee:
            raise NotFoundError("User not found")
        self.set_day_status(
            user_id=employee.user_id,
            employee_id=employee.employee_id,
            employee_name=employee.name,
            work_date=day,
            status=AttendanceStatus.LEAVE,
            remarks=remarks,
        )
        logger.info("Marked %s as leave on %s", employee.employee_id, day.isoformat())

    def status_counts(self, user_id: int, *, since: date) -> Dict[str, int]:
        return status_breakdown(self._attendance.status_summary(user_id=user_id, start_date=since))

    def trend(self, since: date) -> list:
        return [p.to_dict() for p in self._attendance.monthly_trend(since)]

    def report(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        employee_id: Optional[str] = None,
    ) -> dict:
        employee_id = (employee_id or "").strip().upper() or None
        rows, _ = self._attendance.search(employee_id=employee_id, start_date=start_date, end_date=end_date)
        summary = self._attendance.status_summary(employee_id=employee_id, start_date=start_date, end_date=end_date)
        return {"data": [r.to_dict() for r in rows], "summary": [s.to_dict() for s in summary]}
