from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import iso
from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float

    def to_dict(self) -> dict:
        return {"latitude": self.latitude, "longitude": self.longitude}


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's attendance for one calendar day.

    (user_id, work_date) is unique. Records synthesized by leave approval or
    mark-leave have no check-in/check-out.
    """

    attendance_id: int
    user_id: int
    employee_id: str
    employee_name: str
    work_date: date
    status: AttendanceStatus
    check_in_time: Optional[datetime] = None
    check_out_time: Optional[datetime] = None
    hours: float = 0.0
    check_in_location: Optional[GeoPoint] = None
    check_out_location: Optional[GeoPoint] = None
    remarks: Optional[str] = None

    @property
    def checked_in(self) -> bool:
        return self.check_in_time is not None

    @property
    def checked_out(self) -> bool:
        return self.check_out_time is not None

    def to_dict(self) -> dict:
        location = {}
        if self.check_in_location:
            location["checkIn"] = self.check_in_location.to_dict()
        if self.check_out_location:
            location["checkOut"] = self.check_out_location.to_dict()
        return {
            "id": self.attendance_id,
            "userId": self.user_id,
            "employeeId": self.employee_id,
            "employeeName": self.employee_name,
            "date": iso(self.work_date),
            "checkIn": iso(self.check_in_time),
            "checkOut": iso(self.check_out_time),
            "status": self.status.value,
            "hours": float(self.hours),
            "location": location or None,
            "remarks": self.remarks,
        }


@dataclass(frozen=True)
class StatusCount:
    """Read-model for per-status aggregates (counts and summed hours)."""

    status: AttendanceStatus
    count: int
    total_hours: float = 0.0

    def to_dict(self) -> dict:
        return {"status": self.status.value, "count": self.count, "totalHours": round(self.total_hours, 1)}


@dataclass(frozen=True)
class TrendPoint:
    year: int
    month: int
    status: AttendanceStatus
    count: int

    def to_dict(self) -> dict:
        return {"year": self.year, "month": self.month, "status": self.status.value, "count": self.count}
