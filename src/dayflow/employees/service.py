from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Dict, Optional

from werkzeug.security import generate_password_hash

from ..common.datetime_utils import parse_date_arg
from ..common.pagination import PageRequest
from ..common.validators import (
    optional_choice,
    optional_str,
    require_amount,
    require_choice,
    require_email,
    require_min_length,
    require_non_empty,
)
from ..core.enums import EmploymentStatus, Role
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from .model import Employee, NewEmployee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)

# Fields HR/managers may change on an existing employee. employee_id is immutable.
_EDITABLE = {
    "name": "name",
    "department": "department",
    "position": "position",
    "role": "role",
    "salary": "salary",
    "phone": "phone",
    "address": "address",
    "status": "status",
}


class EmployeeService:
    """Use case: employee directory (create, update, soft delete, stats)."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def get(self, user_id: int) -> Employee:
        employee = self._employees.get_by_id(int(user_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def create_account(
        self,
        *,
        employee_id: Any,
        name: Any,
        email: Any,
        password: Any,
        role: Role = Role.EMPLOYEE,
        department: Any = None,
        position: Any = None,
        salary: Any = None,
        phone: Any = None,
        address: Any = None,
        join_date: Any = None,
        require_placement: bool = False,
    ) -> Employee:
        """Validate and persist a new employee; the password is hashed here."""
        employee_id = require_min_length(employee_id, "Employee ID", 3).upper()
        name = require_min_length(name, "Name", 2)
        email = require_email(email)
        password = require_min_length(password, "Password", 6)
        if require_placement:
            department = require_non_empty(department, "Department")
            position = require_non_empty(position, "Position")
        else:
            department = optional_str(department, "Department")
            position = optional_str(position, "Position")

        if self._employees.find_conflict(email=email, employee_id=employee_id):
            raise ConflictError("Employee with this email or employee ID already exists")

        user_id = self._employees.create(
            NewEmployee(
                employee_id=employee_id,
                name=name,
                email=email,
                password_hash=generate_password_hash(password),
                role=role,
                department=department,
                position=position,
                salary=require_amount(salary, "Salary") if salary is not None else None,
                phone=optional_str(phone, "Phone"),
                address=optional_str(address, "Address"),
                join_date=parse_date_arg(join_date, "Join date"),
            )
        )
        logger.info("Created employee %s (%s) with role %s", employee_id, email, role.value)
        return self.get(user_id)

    def create_employee(self, payload: Dict[str, Any]) -> Employee:
        role = require_choice(payload.get("role") or Role.EMPLOYEE.value, Role, "Role")
        return self.create_account(
            employee_id=payload.get("employeeId"),
            name=payload.get("name"),
            email=payload.get("email"),
            password=payload.get("password"),
            role=role,
            department=payload.get("department"),
            position=payload.get("position"),
            salary=payload.get("salary"),
            phone=payload.get("phone"),
            address=payload.get("address"),
            join_date=payload.get("joinDate"),
            require_placement=True,
        )

    def update_employee(self, user_id: int, payload: Dict[str, Any]) -> Employee:
        employee = self.get(user_id)

        changes: Dict[str, Any] = {}
        for key, column in _EDITABLE.items():
            if key not in payload:
                continue
            value = payload[key]
            if key == "name":
                value = require_min_length(value, "Name", 2)
            elif key == "role":
                value = require_choice(value, Role, "Role")
            elif key == "status":
                value = require_choice(value, EmploymentStatus, "Status")
            elif key == "salary":
                value = require_amount(value, "Salary") if value is not None else None
            else:
                value = optional_str(value, key.capitalize())
            changes[column] = value

        if not changes:
            return employee

        self._employees.update_fields(employee.user_id, changes)
        logger.info("Updated employee %s: %s", employee.employee_id, ", ".join(sorted(changes)))
        return self.get(employee.user_id)

    def deactivate(self, user_id: int) -> Employee:
        """Soft delete: employees are never removed, only marked inactive."""
        employee = self.get(user_id)
        self._employees.update_fields(employee.user_id, {"status": EmploymentStatus.INACTIVE})
        logger.info("Deactivated employee %s", employee.employee_id)
        return replace(employee, status=EmploymentStatus.INACTIVE)

    def list_employees(
        self,
        *,
        page: PageRequest,
        search: Optional[str] = None,
        department: Optional[str] = None,
        status: Optional[str] = None,
    ) -> dict:
        status_filter = optional_choice(status, EmploymentStatus, "Status")
        rows, total = self._employees.search(
            search=(search or "").strip() or None,
            department=(department or "").strip() or None,
            status=status_filter,
            offset=page.offset,
            limit=page.limit,
        )
        return {"employees": [e.to_dict() for e in rows], "pagination": page.describe(total)}

    def stats(self) -> dict:
        counts = self._employees.count_by_status()
        return {
            "stats": {
                "total": sum(counts.values()),
                "active": counts.get(EmploymentStatus.ACTIVE.value, 0),
                "inactive": counts.get(EmploymentStatus.INACTIVE.value, 0),
                "onLeave": counts.get(EmploymentStatus.ON_LEAVE.value, 0),
            },
            "departmentStats": list(self._employees.department_headcount()),
        }

    def update_profile(self, employee: Employee, payload: Dict[str, Any]) -> Employee:
        """Self-service profile edit: only contact details and display name."""
        changes: Dict[str, Any] = {}
        if "name" in payload:
            changes["name"] = require_min_length(payload["name"], "Name", 2)
        for key in ("phone", "address", "avatar"):
            if key in payload:
                changes[key] = optional_str(payload[key], key.capitalize())
        if not changes:
            raise ValidationError("Nothing to update")
        self._employees.update_fields(employee.user_id, changes)
        return self.get(employee.user_id)
