class DomainError(Exception):
    """Base exception for business rule violations.

    Every subclass is an operational error: its message is safe to show to
    the API caller, and ``status_code`` is the HTTP status it maps to.
    """

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    status_code = 400


class AuthenticationError(DomainError):
    """Raised when credentials or tokens are missing, invalid or expired."""

    status_code = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403


class NotFoundError(DomainError):
    status_code = 404


class ConflictError(DomainError):
    """Raised when an operation would break a state invariant.

    Duplicate natural keys, already-decided leave requests, paid payroll
    records and repeated check-ins all end up here.
    """

    status_code = 409
