from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence, Tuple

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from ..core.enums import AttendanceStatus
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, limit_clause, where_clause
from .model import AttendanceRecord, GeoPoint, StatusCount, TrendPoint
from .repository import AttendanceRepository

_COLUMNS = """
    attendance_id, user_id, employee_id, employee_name, work_date, check_in_time, check_out_time,
    status, hours, check_in_lat, check_in_lng, check_out_lat, check_out_lng, remarks
"""


def _point(lat, lng) -> Optional[GeoPoint]:
    if lat is None or lng is None:
        return None
    return GeoPoint(latitude=float(lat), longitude=float(lng))


def _coords(location: Optional[GeoPoint]) -> tuple:
    return (location.latitude, location.longitude) if location else (None, None)


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        employee_id=r["employee_id"],
        employee_name=r["employee_name"],
        work_date=r["work_date"],
        status=AttendanceStatus(r["status"]),
        check_in_time=r.get("check_in_time"),
        check_out_time=r.get("check_out_time"),
        hours=float(r.get("hours") or 0),
        check_in_location=_point(r.get("check_in_lat"), r.get("check_in_lng")),
        check_out_location=_point(r.get("check_out_lat"), r.get("check_out_lng")),
        remarks=r.get("remarks"),
    )


def _filters(
    *,
    user_id: Optional[int],
    employee_id: Optional[str],
    status: Optional[AttendanceStatus] = None,
    start_date: Optional[date],
    end_date: Optional[date],
) -> Tuple[str, list]:
    clauses: list[str] = []
    params: list[object] = []
    if user_id is not None:
        clauses.append("user_id=%s")
        params.append(int(user_id))
    if employee_id:
        clauses.append("employee_id=%s")
        params.append(employee_id)
    if status is not None:
        clauses.append("status=%s")
        params.append(status.value)
    if start_date is not None:
        clauses.append("work_date>=%s")
        params.append(start_date)
    if end_date is not None:
        clauses.append("work_date<=%s")
        params.append(end_date)
    return where_clause(clauses), params


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE user_id=%s AND work_date=%s",
                (int(user_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

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
        lat, lng = _coords(location)
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(
                        user_id, employee_id, employee_name, work_date, check_in_time, status,
                        check_in_lat, check_in_lng
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (int(user_id), employee_id, employee_name, work_date, check_in_time, status.value, lat, lng),
                )
                return int(cur.lastrowid)
        except IntegrityError as e:
            # a concurrent check-in created the row first
            if e.errno == errorcode.ER_DUP_ENTRY:
                raise ConflictError("Already checked in today")
            raise

    def update_checkin(
        self,
        *,
        attendance_id: int,
        check_in_time: datetime,
        status: AttendanceStatus,
        location: Optional[GeoPoint] = None,
    ) -> bool:
        lat, lng = _coords(location)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_in_time=%s, status=%s,
                    check_in_lat=COALESCE(%s, check_in_lat), check_in_lng=COALESCE(%s, check_in_lng)
                WHERE attendance_id=%s AND check_in_time IS NULL
                """,
                (check_in_time, status.value, lat, lng, int(attendance_id)),
            )
            return cur.rowcount > 0

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        hours: float,
        status: AttendanceStatus,
        location: Optional[GeoPoint] = None,
    ) -> bool:
        lat, lng = _coords(location)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s, hours=%s, status=%s,
                    check_out_lat=COALESCE(%s, check_out_lat), check_out_lng=COALESCE(%s, check_out_lng)
                WHERE attendance_id=%s AND check_out_time IS NULL
                """,
                (check_out_time, hours, status.value, lat, lng, int(attendance_id)),
            )
            return cur.rowcount > 0

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
        # single statement so each day is atomic on its own
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(user_id, employee_id, employee_name, work_date, status, remarks)
                VALUES(%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE status=VALUES(status), remarks=VALUES(remarks)
                """,
                (int(user_id), employee_id, employee_name, work_date, status.value, remarks),
            )

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
        where, params = _filters(
            user_id=user_id, employee_id=employee_id, status=status, start_date=start_date, end_date=end_date
        )
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS n FROM attendance_records {where}", tuple(params))
            total = int(fetchone(cur)["n"])

            page_params = list(params)
            paging = limit_clause(offset, limit, page_params)
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM attendance_records {where}
                ORDER BY work_date DESC, attendance_id DESC {paging}
                """,
                tuple(page_params),
            )
            return [_to_record(r) for r in fetchall(cur)], total

    def status_summary(
        self,
        *,
        user_id: Optional[int] = None,
        employee_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[StatusCount]:
        where, params = _filters(user_id=user_id, employee_id=employee_id, start_date=start_date, end_date=end_date)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT status, COUNT(*) AS n, COALESCE(SUM(hours), 0) AS total_hours
                FROM attendance_records {where}
                GROUP BY status
                """,
                tuple(params),
            )
            return [
                StatusCount(status=AttendanceStatus(r["status"]), count=int(r["n"]), total_hours=float(r["total_hours"]))
                for r in fetchall(cur)
            ]

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            # MySQL sorts NULLs first ascending, so DESC puts records without check-in last
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM attendance_records
                WHERE work_date=%s
                ORDER BY check_in_time DESC, attendance_id DESC
                """,
                (work_date,),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def monthly_trend(self, since: date) -> Sequence[TrendPoint]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT YEAR(work_date) AS y, MONTH(work_date) AS m, status, COUNT(*) AS n
                FROM attendance_records
                WHERE work_date>=%s
                GROUP BY y, m, status
                ORDER BY y, m, status
                """,
                (since,),
            )
            return [
                TrendPoint(year=int(r["y"]), month=int(r["m"]), status=AttendanceStatus(r["status"]), count=int(r["n"]))
                for r in fetchall(cur)
            ]
