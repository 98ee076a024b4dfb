from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..common.datetime_utils import iso
from ..core.enums import EmploymentStatus, Role


@dataclass(frozen=True)
class Employee:
    """Domain entity: one person in the directory.

    ``user_id`` is the internal key; ``employee_id`` is the uppercase
    business key shown to people and never changed after creation.
    """

    user_id: int
    employee_id: str
    name: str
    email: str
    password_hash: str
    role: Role
    department: Optional[str] = None
    position: Optional[str] = None
    status: EmploymentStatus = EmploymentStatus.ACTIVE
    salary: Optional[Decimal] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    avatar: Optional[str] = None
    join_date: Optional[date] = None
    refresh_token: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status == EmploymentStatus.ACTIVE

    def summary(self) -> dict:
        return {
            "id": self.user_id,
            "employeeId": self.employee_id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "department": self.department,
            "position": self.position,
            "avatar": self.avatar,
        }

    def to_dict(self) -> dict:
        # password hash and refresh token never leave the service
        data = self.summary()
        data.update(
            {
                "status": self.status.value,
                "salary": float(self.salary) if self.salary is not None else None,
                "phone": self.phone,
                "address": self.address,
                "joinDate": iso(self.join_date),
                "createdAt": iso(self.created_at),
                "updatedAt": iso(self.updated_at),
            }
        )
        return data


@dataclass(frozen=True)
class NewEmployee:
    employee_id: str
    name: str
    email: str
    password_hash: str
    role: Role = Role.EMPLOYEE
    department: Optional[str] = None
    position: Optional[str] = None
    salary: Optional[Decimal] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    join_date: Optional[date] = None
