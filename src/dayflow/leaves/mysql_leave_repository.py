from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional, Sequence, Tuple

from ..core.enums import LeaveStatus, LeaveType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, limit_clause, where_clause
from .model import LeaveRequest, LeaveTotals, NewLeaveRequest
from .repository import LeaveRepository

_COLUMNS = """
    request_id, user_id, employee_id, employee_name, leave_type, start_date, end_date, days,
    reason, status, applied_at, decided_by, decided_at, remarks
"""


def _to_request(r: dict) -> LeaveRequest:
    return LeaveRequest(
        request_id=int(r["request_id"]),
        user_id=int(r["user_id"]),
        employee_id=r["employee_id"],
        employee_name=r["employee_name"],
        leave_type=LeaveType(r["leave_type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        days=float(r["days"]),
        reason=r["reason"],
        status=LeaveStatus(r["status"]),
        applied_at=r["applied_at"],
        decided_by=int(r["decided_by"]) if r.get("decided_by") is not None else None,
        decided_at=r.get("decided_at"),
        remarks=r.get("remarks"),
    )


def _to_totals(rows: Sequence[dict]) -> Sequence[LeaveTotals]:
    return [LeaveTotals(key=r["k"], count=int(r["n"]), total_days=float(r["total_days"] or 0)) for r in rows]


def _filters(
    *,
    user_id: Optional[int] = None,
    employee_id: Optional[str] = None,
    status: Optional[LeaveStatus] = None,
    applied_from: Optional[date] = None,
    applied_to: Optional[date] = None,
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
    if applied_from is not None:
        clauses.append("applied_at>=%s")
        params.append(applied_from)
    if applied_to is not None:
        # inclusive of the whole last day
        clauses.append("applied_at<%s")
        params.append(applied_to + timedelta(days=1))
    return where_clause(clauses), params


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, new: NewLeaveRequest) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(
                    user_id, employee_id, employee_name, leave_type, start_date, end_date,
                    days, reason, status, applied_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,'Pending',%s)
                """,
                (
                    int(new.user_id),
                    new.employee_id,
                    new.employee_name,
                    new.leave_type.value,
                    new.start_date,
                    new.end_date,
                    new.days,
                    new.reason,
                    new.applied_at,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leave_requests WHERE request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _to_request(r) if r else None

    def search(
        self,
        *,
        user_id: Optional[int] = None,
        employee_id: Optional[str] = None,
        status: Optional[LeaveStatus] = None,
        applied_from: Optional[date] = None,
        applied_to: Optional[date] = None,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> Tuple[Sequence[LeaveRequest], int]:
        where, params = _filters(
            user_id=user_id,
            employee_id=employee_id,
            status=status,
            applied_from=applied_from,
            applied_to=applied_to,
        )
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS n FROM leave_requests {where}", tuple(params))
            total = int(fetchone(cur)["n"])

            page_params = list(params)
            paging = limit_clause(offset, limit, page_params)
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM leave_requests {where}
                ORDER BY applied_at DESC, request_id DESC {paging}
                """,
                tuple(page_params),
            )
            return [_to_request(r) for r in fetchall(cur)], total

    def decide(
        self,
        request_id: int,
        *,
        status: LeaveStatus,
        decided_by: int,
        decided_at: datetime,
        remarks: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, decided_by=%s, decided_at=%s, remarks=COALESCE(%s, remarks)
                WHERE request_id=%s AND status='Pending'
                """,
                (status.value, int(decided_by), decided_at, remarks, int(request_id)),
            )
            return cur.rowcount > 0

    def delete_pending(self, request_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM leave_requests WHERE request_id=%s AND status='Pending'", (int(request_id),))
            return cur.rowcount > 0

    def totals_by_status(self) -> Sequence[LeaveTotals]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT status AS k, COUNT(*) AS n, SUM(days) AS total_days
                FROM leave_requests
                GROUP BY status
                """
            )
            return _to_totals(fetchall(cur))

    def totals_by_type(
        self,
        *,
        status: Optional[LeaveStatus] = None,
        employee_id: Optional[str] = None,
        applied_from: Optional[date] = None,
        applied_to: Optional[date] = None,
    ) -> Sequence[LeaveTotals]:
        where, params = _filters(
            employee_id=employee_id, status=status, applied_from=applied_from, applied_to=applied_to
        )
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT leave_type AS k, COUNT(*) AS n, SUM(days) AS total_days
                FROM leave_requests {where}
                GROUP BY leave_type
                ORDER BY leave_type
                """,
                tuple(params),
            )
            return _to_totals(fetchall(cur))

    def approved_totals_by_month(self, *, since: date) -> Sequence[LeaveTotals]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT MONTH(start_date) AS k, COUNT(*) AS n, SUM(days) AS total_days
                FROM leave_requests
                WHERE status='Approved' AND start_date>=%s
                GROUP BY k
                ORDER BY k
                """,
                (since,),
            )
            return [
                LeaveTotals(key=int(r["k"]), count=int(r["n"]), total_days=float(r["total_days"] or 0))
                for r in fetchall(cur)
            ]

    def approved_days(self, user_id: int, *, since: date) -> float:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COALESCE(SUM(days), 0) AS total_days
                FROM leave_requests
                WHERE user_id=%s AND status='Approved' AND start_date>=%s
                """,
                (int(user_id), since),
            )
            return float(fetchone(cur)["total_days"])

    def count_pending(self, user_id: Optional[int] = None) -> int:
        where, params = _filters(user_id=user_id, status=LeaveStatus.PENDING)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS n FROM leave_requests {where}", tuple(params))
            return int(fetchone(cur)["n"])
