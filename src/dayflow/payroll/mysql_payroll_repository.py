from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional, Sequence, Tuple

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from ..core.enums import PayrollStatus
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dec, fetchall, fetchone, limit_clause, where_clause
from .model import PayBreakdown, PayrollAmounts, PayrollRecord, PayrollTotals
from .repository import PayrollRepository

_COLUMNS = """
    payroll_id, user_id, employee_id, employee_name, month, base_salary, allowances, deductions,
    bonus, tax, net_salary, status, payment_date, payment_method, remarks, hra, travel_allowance,
    medical_allowance, provident_fund, insurance, other_deductions, created_at, updated_at
"""


def _to_record(r: dict) -> PayrollRecord:
    return PayrollRecord(
        payroll_id=int(r["payroll_id"]),
        user_id=int(r["user_id"]),
        employee_id=r["employee_id"],
        employee_name=r["employee_name"],
        month=r["month"],
        base_salary=dec(r["base_salary"]),
        allowances=dec(r["allowances"]),
        deductions=dec(r["deductions"]),
        bonus=dec(r["bonus"]),
        tax=dec(r["tax"]),
        net_salary=dec(r["net_salary"]),
        status=PayrollStatus(r["status"]),
        breakdown=PayBreakdown(
            hra=dec(r["hra"]),
            travel_allowance=dec(r["travel_allowance"]),
            medical_allowance=dec(r["medical_allowance"]),
            provident_fund=dec(r["provident_fund"]),
            insurance=dec(r["insurance"]),
            other_deductions=dec(r["other_deductions"]),
        ),
        payment_date=r.get("payment_date"),
        payment_method=r.get("payment_method"),
        remarks=r.get("remarks"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


def _amount_params(a: PayrollAmounts) -> tuple:
    b = a.breakdown
    return (
        a.base_salary,
        a.allowances,
        a.deductions,
        a.bonus,
        a.tax,
        a.net_salary,
        a.remarks,
        b.hra,
        b.travel_allowance,
        b.medical_allowance,
        b.provident_fund,
        b.insurance,
        b.other_deductions,
    )


def _filters(
    *,
    user_id: Optional[int] = None,
    employee_id: Optional[str] = None,
    month: Optional[str] = None,
    status: Optional[PayrollStatus] = None,
    department: Optional[str] = None,
    created_from: Optional[date] = None,
    created_to: Optional[date] = None,
) -> Tuple[str, list]:
    clauses: list[str] = []
    params: list[object] = []
    if user_id is not None:
        clauses.append("user_id=%s")
        params.append(int(user_id))
    if employee_id:
        clauses.append("employee_id=%s")
        params.append(employee_id)
    if month:
        clauses.append("month=%s")
        params.append(month)
    if status is not None:
        clauses.append("status=%s")
        params.append(status.value)
    if department:
        clauses.append("user_id IN (SELECT user_id FROM employees WHERE department=%s)")
        params.append(department)
    if created_from is not None:
        clauses.append("created_at>=%s")
        params.append(created_from)
    if created_to is not None:
        clauses.append("created_at<%s")
        params.append(created_to + timedelta(days=1))
    return where_clause(clauses), params


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, payroll_id: int) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM payroll_records WHERE payroll_id=%s", (int(payroll_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_user_and_month(self, user_id: int, month: str) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM payroll_records WHERE user_id=%s AND month=%s",
                (int(user_id), month),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def create(
        self,
        *,
        user_id: int,
        employee_id: str,
        employee_name: str,
        month: str,
        amounts: PayrollAmounts,
        created_at: datetime,
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO payroll_records(
                        user_id, employee_id, employee_name, month,
                        base_salary, allowances, deductions, bonus, tax, net_salary, remarks,
                        hra, travel_allowance, medical_allowance, provident_fund, insurance, other_deductions,
                        status, created_at, updated_at
                    )
                    VALUES(%s,%s,%s,%s, %s,%s,%s,%s,%s,%s,%s, %s,%s,%s,%s,%s,%s, 'Pending',%s,%s)
                    """,
                    (int(user_id), employee_id, employee_name, month, *_amount_params(amounts), created_at, created_at),
                )
                return int(cur.lastrowid)
        except IntegrityError as e:
            if e.errno == errorcode.ER_DUP_ENTRY:
                raise ConflictError("Payroll for this month already exists")
            raise

    def update_amounts(self, payroll_id: int, amounts: PayrollAmounts, *, updated_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE payroll_records
                SET base_salary=%s, allowances=%s, deductions=%s, bonus=%s, tax=%s, net_salary=%s, remarks=%s,
                    hra=%s, travel_allowance=%s, medical_allowance=%s, provident_fund=%s, insurance=%s,
                    other_deductions=%s, updated_at=%s
                WHERE payroll_id=%s AND status<>'Paid'
                """,
                (*_amount_params(amounts), updated_at, int(payroll_id)),
            )
            return cur.rowcount > 0

    def mark_paid(self, payroll_id: int, *, payment_date: datetime, payment_method: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE payroll_records
                SET status='Paid', payment_date=%s, payment_method=%s, updated_at=%s
                WHERE payroll_id=%s AND status<>'Paid'
                """,
                (payment_date, payment_method, payment_date, int(payroll_id)),
            )
            return cur.rowcount > 0

    def search(
        self,
        *,
        user_id: Optional[int] = None,
        employee_id: Optional[str] = None,
        month: Optional[str] = None,
        status: Optional[PayrollStatus] = None,
        department: Optional[str] = None,
        created_from: Optional[date] = None,
        created_to: Optional[date] = None,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> Tuple[Sequence[PayrollRecord], int]:
        where, params = _filters(
            user_id=user_id,
            employee_id=employee_id,
            month=month,
            status=status,
            department=department,
            created_from=created_from,
            created_to=created_to,
        )
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS n FROM payroll_records {where}", tuple(params))
            total = int(fetchone(cur)["n"])

            page_params = list(params)
            paging = limit_clause(offset, limit, page_params)
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM payroll_records {where}
                ORDER BY created_at DESC, payroll_id DESC {paging}
                """,
                tuple(page_params),
            )
            return [_to_record(r) for r in fetchall(cur)], total

    def totals(
        self,
        *,
        employee_id: Optional[str] = None,
        month: Optional[str] = None,
        status: Optional[PayrollStatus] = None,
        department: Optional[str] = None,
        created_from: Optional[date] = None,
        created_to: Optional[date] = None,
    ) -> PayrollTotals:
        where, params = _filters(
            employee_id=employee_id,
            month=month,
            status=status,
            department=department,
            created_from=created_from,
            created_to=created_to,
        )
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT COUNT(*) AS n, COALESCE(SUM(net_salary), 0) AS total FROM payroll_records {where}",
                tuple(params),
            )
            r = fetchone(cur)
            return PayrollTotals(count=int(r["n"]), total=dec(r["total"]))

    def totals_by_status(self, month: str) -> Sequence[Tuple[PayrollStatus, PayrollTotals]]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT status, COUNT(*) AS n, COALESCE(SUM(net_salary), 0) AS total
                FROM payroll_records
                WHERE month=%s
                GROUP BY status
                ORDER BY status
                """,
                (month,),
            )
            return [
                (PayrollStatus(r["status"]), PayrollTotals(count=int(r["n"]), total=dec(r["total"])))
                for r in fetchall(cur)
            ]
