from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence, Tuple

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, GeoPoint, StatusCount, TrendPoint


class AttendanceRepository(Protocol):
    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_checkin(
        self,
        *,
        user_id: int,
        employee_id: str,
        employee_name: str,
        work_date: date,
        check_in_time: datetime,
        status: AttendanceStatus,
        location: Optional[GeoPoint] = None,
    ) -> int:
        """Insert today's row; raises ConflictError if one already exists."""
        raise NotImplementedError

    def update_checkin(
        self,
        *,
        attendance_id: int,
        check_in_time: datetime,
        status: AttendanceStatus,
        location: Optional[GeoPoint] = None,
    ) -> bool:
        """Set check-in on an existing row that has none yet.

        Returns False when the row already had a check-in.
        """
        raise NotImplementedError

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        hours: float,
        status: AttendanceStatus,
        location: Optional[GeoPoint] = None,
    ) -> bool:
        """Returns False when the row was already checked out."""
        raise NotImplementedError

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
        """Find-or-create the (user, day) row and force its status and remarks."""
        raise NotImplementedError

    def search(
        self,
        *,
        user_id: Optional[int] = None,
        employee_id: Optional[str] = None,
        status: Optional[AttendanceStatus] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> Tuple[Sequence[AttendanceRecord], int]:
        """Newest day first; returns (page, total matching)."""
        raise NotImplementedError

    def status_summary(
        self,
        *,
        user_id: Optional[int] = None,
        employee_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[StatusCount]:
        raise NotImplementedError

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        """All rows for one day, latest check-in first."""
        raise NotImplementedError

    def monthly_trend(self, since: date) -> Sequence[TrendPoint]:
        raise NotImplementedError
