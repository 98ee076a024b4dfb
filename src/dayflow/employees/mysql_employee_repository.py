from __future__ import annotations

from typing import Any, Dict, Optional, Sequence, Tuple

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from ..core.enums import EmploymentStatus, Role
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, limit_clause, update_set, where_clause
from .model import Employee, NewEmployee
from .repository import UPDATABLE_FIELDS, EmployeeRepository

_COLUMNS = """
    user_id, employee_id, name, email, password_hash, role, department, position,
    status, salary, phone, address, avatar, join_date, refresh_token, created_at, updated_at
"""


def _to_employee(r: dict) -> Employee:
    return Employee(
        user_id=int(r["user_id"]),
        employee_id=r["employee_id"],
        name=r["name"],
        email=r["email"],
        password_hash=r["password_hash"],
        role=Role(r["role"]),
        department=r.get("department"),
        position=r.get("position"),
        status=EmploymentStatus(r["status"]),
        salary=r.get("salary"),
        phone=r.get("phone"),
        address=r.get("address"),
        avatar=r.get("avatar"),
        join_date=r.get("join_date"),
        refresh_token=r.get("refresh_token"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, column: str, value: Any) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE {column}=%s", (value,))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def get_by_id(self, user_id: int) -> Optional[Employee]:
        return self._get_one("user_id", int(user_id))

    def get_by_employee_id(self, employee_id: str) -> Optional[Employee]:
        return self._get_one("employee_id", employee_id.upper())

    def get_by_email(self, email: str) -> Optional[Employee]:
        return self._get_one("email", email.lower())

    def find_conflict(self, *, email: str, employee_id: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE email=%s OR employee_id=%s LIMIT 1",
                (email.lower(), employee_id.upper()),
            )
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def create(self, new: NewEmployee) -> int:
        # the unique keys on email and employee_id settle signups that race past find_conflict
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO employees(
                        employee_id, name, email, password_hash, role, department, position,
                        salary, phone, address, join_date, status
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,COALESCE(%s, CURDATE()),'active')
                    """,
                    (
                        new.employee_id,
                        new.name,
                        new.email,
                        new.password_hash,
                        new.role.value,
                        new.department,
                        new.position,
                        new.salary,
                        new.phone,
                        new.address,
                        new.join_date,
                    ),
                )
                return int(cur.lastrowid)
        except IntegrityError as e:
            if e.errno == errorcode.ER_DUP_ENTRY:
                raise ConflictError("Employee with this email or employee ID already exists")
            raise

    def update_fields(self, user_id: int, fields: Dict[str, Any]) -> bool:
        values = {k: (v.value if isinstance(v, (Role, EmploymentStatus)) else v) for k, v in fields.items()}
        assignments, params = update_set(values, UPDATABLE_FIELDS)
        if not assignments:
            return False
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE employees SET {assignments} WHERE user_id=%s", (*params, int(user_id)))
            return cur.rowcount > 0

    def set_refresh_token(self, user_id: int, token: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE employees SET refresh_token=%s WHERE user_id=%s", (token, int(user_id)))
            return cur.rowcount > 0

    def search(
        self,
        *,
        search: Optional[str] = None,
        department: Optional[str] = None,
        status: Optional[EmploymentStatus] = None,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> Tuple[Sequence[Employee], int]:
        clauses: list[str] = []
        params: list[object] = []
        if search:
            like = f"%{search.lower()}%"
            clauses.append("(LOWER(name) LIKE %s OR LOWER(email) LIKE %s OR LOWER(employee_id) LIKE %s)")
            params.extend([like, like, like])
        if department:
            clauses.append("department=%s")
            params.append(department)
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        where = where_clause(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS n FROM employees {where}", tuple(params))
            total = int(fetchone(cur)["n"])

            page_params = list(params)
            paging = limit_clause(offset, limit, page_params)
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees {where} ORDER BY created_at DESC, user_id DESC {paging}",
                tuple(page_params),
            )
            return [_to_employee(r) for r in fetchall(cur)], total

    def count_by_status(self) -> Dict[str, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT status, COUNT(*) AS n FROM employees GROUP BY status")
            return {r["status"]: int(r["n"]) for r in fetchall(cur)}

    def department_headcount(self) -> Sequence[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT department, COUNT(*) AS n
                FROM employees
                WHERE status='active'
                GROUP BY department
                ORDER BY n DESC
                """
            )
            return [{"department": r.get("department"), "count": int(r["n"])} for r in fetchall(cur)]
