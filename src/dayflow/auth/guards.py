from __future__ import annotations

from functools import wraps
from typing import Callable, Iterable, Optional

from flask import g, request

from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from ..employees.model import Employee
from .service import AuthService


def bearer_token() -> Optional[str]:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def current_employee() -> Employee:
    return g.current_employee


class Guards:
    """View decorators bound to one AuthService.

    ``login_required`` puts the caller into ``flask.g``; ``roles_required``
    additionally checks the caller's role against an allow-list.
    """

    def __init__(self, auth_service: AuthService):
        self._auth = auth_service

    def login_required(self, view: Callable) -> Callable:
        @wraps(view)
        def wrapper(*args, **kwargs):
            g.current_employee = self._auth.authenticate(bearer_token())
            return view(*args, **kwargs)

        return wrapper

    def roles_required(self, *roles: Role) -> Callable[[Callable], Callable]:
        allowed: Iterable[Role] = frozenset(roles)

        def decorator(view: Callable) -> Callable:
            @wraps(view)
            def wrapper(*args, **kwargs):
                employee = self._auth.authenticate(bearer_token())
                if employee.role not in allowed:
                    raise AuthorizationError("You do not have permission to perform this action")
                g.current_employee = employee
                return view(*args, **kwargs)

            return wrapper

        return decorator
