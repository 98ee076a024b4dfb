import pytest

from dayflow.core.enums import EmploymentStatus, Role
from dayflow.core.exceptions import AuthenticationError, AuthorizationError, ConflictError, ValidationError


def _register(container, **overrides):
    fields = {
        "employee_id": "emp200",
        "name": "Jordan Lee",
        "email": "Jordan@DayFlow.test",
        "password": "secret123",
    }
    fields.update(overrides)
    return container.auth_service.register(**fields)


def test_register_normalizes_identity_and_starts_session(container, repos):
    result = _register(container)

    assert result.employee.employee_id == "EMP200"
    assert result.employee.email == "jordan@dayflow.test"
    assert result.employee.role == Role.EMPLOYEE
    assert repos.employees.get_by_id(result.employee.user_id).refresh_token == result.refresh_token


def test_register_rejects_manager_role(container):
    with pytest.raises(ValidationError, match="Role must be one of: employee, hr"):
        _register(container, role="manager")


def test_register_rejects_duplicate_email(container):
    _register(container)

    with pytest.raises(ConflictError):
        _register(container, employee_id="EMP201")


def test_login_with_wrong_password_is_unauthorized(container, employee):
    with pytest.raises(AuthenticationError, match="Invalid credentials"):
        container.auth_service.login(email=employee.email, password="wrong-password")


def test_login_with_mismatched_role_is_unauthorized(container, employee):
    with pytest.raises(AuthenticationError, match="Invalid credentials for this role"):
        container.auth_service.login(email=employee.email, password="secret123", role="hr")


def test_login_of_inactive_account_is_forbidden(container, repos, employee):
    repos.employees.update_fields(employee.user_id, {"status": EmploymentStatus.INACTIVE})

    with pytest.raises(AuthorizationError, match="Account is not active"):
        container.auth_service.login(email=employee.email, password="secret123")


def test_login_replaces_previous_refresh_token(container, employee):
    first = container.auth_service.login(email=employee.email, password="secret123")
    second = container.auth_service.login(email=employee.email, password="secret123")

    with pytest.raises(AuthenticationError, match="Invalid refresh token"):
        container.auth_service.refresh(first.refresh_token)
    assert container.auth_service.refresh(second.refresh_token)


def test_logout_invalidates_refresh_token(container, employee):
    session = container.auth_service.login(email=employee.email, password="secret123")
    container.auth_service.logout(employee)

    with pytest.raises(AuthenticationError, match="Invalid refresh token"):
        container.auth_service.refresh(session.refresh_token)


def test_authenticate_without_token(container):
    with pytest.raises(AuthenticationError, match="no token provided"):
        container.auth_service.authenticate(None)
