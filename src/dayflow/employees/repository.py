from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, Sequence, Tuple

from ..core.enums import EmploymentStatus
from .model import Employee, NewEmployee

# Columns a service may change through ``update_fields``.
UPDATABLE_FIELDS = ("name", "department", "position", "role", "salary", "phone", "address", "avatar", "status")


class EmployeeRepository(Protocol):
    """Repository interface for the identity store.

    Note (DIP): services depend on this interface, never on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_employee_id(self, employee_id: str) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Employee]:
        raise NotImplementedError

    def find_conflict(self, *, email: str, employee_id: str) -> Optional[Employee]:
        """Any employee already holding this email or employee id."""

        raise NotImplementedError

    def create(self, new: NewEmployee) -> int:
        raise NotImplementedError

    def update_fields(self, user_id: int, fields: Dict[str, Any]) -> bool:
        raise NotImplementedError

    def set_refresh_token(self, user_id: int, token: Optional[str]) -> bool:
        raise NotImplementedError

    def search(
        self,
        *,
        search: Optional[str] = None,
        department: Optional[str] = None,
        status: Optional[EmploymentStatus] = None,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> Tuple[Sequence[Employee], int]:
        """Return (page, total matching), newest first."""

        raise NotImplementedError

    def count_by_status(self) -> Dict[str, int]:
        raise NotImplementedError

    def department_headcount(self) -> Sequence[dict]:
        """Active employees per department, largest first."""

        raise NotImplementedError
