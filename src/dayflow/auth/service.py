from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from werkzeug.security import check_password_hash

from ..common.validators import optional_choice, require_email, require_min_length, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..employees.service import EmployeeService
from .tokens import TokenService

logger = logging.getLogger(__name__)

# Roles a person may pick for themselves at signup.
SIGNUP_ROLES = frozenset({Role.EMPLOYEE, Role.HR})


@dataclass(frozen=True)
class AuthResult:
    employee: Employee
    access_token: str
    refresh_token: str

    def to_dict(self) -> dict:
        return {
            "user": self.employee.summary(),
            "accessToken": self.access_token,
            "refreshToken": self.refresh_token,
        }


class AuthService:
    """Use case: signup, login, token refresh and logout.

    At most one refresh token is live per employee: every login overwrites
    the stored one and logout clears it.
    """

    def __init__(self, employees: EmployeeRepository, employee_service: EmployeeService, tokens: TokenService):
        self._employees = employees
        self._employee_service = employee_service
        self._tokens = tokens

    def _start_session(self, employee: Employee) -> AuthResult:
        pair = self._tokens.issue_pair(employee.user_id)
        self._employees.set_refresh_token(employee.user_id, pair.refresh_token)
        return AuthResult(employee=employee, access_token=pair.access_token, refresh_token=pair.refresh_token)

    def register(
        self,
        *,
        employee_id: Any,
        name: Any,
        email: Any,
        password: Any,
        role: Any = None,
        department: Any = None,
        position: Any = None,
    ) -> AuthResult:
        chosen = optional_choice(role, Role, "Role") or Role.EMPLOYEE
        if chosen not in SIGNUP_ROLES:
            raise ValidationError("Role must be one of: employee, hr")

        employee = self._employee_service.create_account(
            employee_id=employee_id,
            name=name,
            email=email,
            password=password,
            role=chosen,
            department=department,
            position=position,
        )
        return self._start_session(employee)

    def login(self, *, email: Any, password: Any, role: Any = None) -> AuthResult:
        email = require_email(email)
        password = require_min_length(password, "Password", 6)
        claimed = optional_choice(role, Role, "Role")

        employee = self._employees.get_by_email(email)
        if not employee:
            raise AuthenticationError("Invalid credentials")

        try:
            ok = check_password_hash(employee.password_hash, password)
        except ValueError:
            # e.g. placeholder or corrupted hashes
            ok = False
        if not ok:
            raise AuthenticationError("Invalid credentials")

        if claimed is not None and claimed != employee.role:
            raise AuthenticationError("Invalid credentials for this role")

        if not employee.is_active:
            raise AuthorizationError("Account is not active")

        logger.info("Employee %s logged in", employee.employee_id)
        return self._start_session(employee)

    def refresh(self, refresh_token: Any) -> str:
        """Exchange the stored refresh token for a new access token."""
        token = require_non_empty(refresh_token, "Refresh token")
        user_id = self._tokens.decode_refresh(token)

        employee = self._employees.get_by_id(user_id)
        if not employee or not employee.refresh_token or employee.refresh_token != token:
            raise AuthenticationError("Invalid refresh token")

        return self._tokens.issue_access(employee.user_id)

    def logout(self, employee: Employee) -> None:
        self._employees.set_refresh_token(employee.user_id, None)
        logger.info("Employee %s logged out", employee.employee_id)

    def authenticate(self, access_token: Optional[str]) -> Employee:
        """Resolve a bearer access token to the employee it was issued for."""
        if not access_token:
            raise AuthenticationError("Not authorized, no token provided")
        user_id = self._tokens.decode_access(access_token)
        employee = self._employees.get_by_id(user_id)
        if not employee:
            raise AuthenticationError("User not found")
        return employee
