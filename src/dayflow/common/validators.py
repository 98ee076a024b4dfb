from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional, Type, TypeVar

from ..core.exceptions import ValidationError

E = TypeVar("E", bound=Enum)

_EMAIL_RE = re.compile(r"^\S+@\S+\.\S+$")


def require_non_empty(value: Any, field_name: str) -> str:
    if value is None or not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: Any, field_name: str, min_len: int) -> str:
    if value is None or not isinstance(value, str) or len(value.strip()) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value.strip()


def optional_str(value: Any, field_name: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")
    return value.strip() or None


def require_email(value: Any, field_name: str = "Email") -> str:
    email = require_non_empty(value, field_name).lower()
    if not _EMAIL_RE.match(email):
        raise ValidationError("Invalid email address")
    return email


def require_choice(value: Any, enum_cls: Type[E], field_name: str) -> E:
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"{field_name} must be one of: {allowed}")


def optional_choice(value: Any, enum_cls: Type[E], field_name: str) -> Optional[E]:
    if value is None or value == "":
        return None
    return require_choice(value, enum_cls, field_name)


def require_amount(value: Any, field_name: str, *, positive: bool = False) -> Decimal:
    """Money amount as Decimal with two decimals; booleans are rejected."""
    if isinstance(value, bool) or not isinstance(value, (int, float, str, Decimal)):
        raise ValidationError(f"{field_name} must be a number")
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(f"{field_name} must be a number")
    if not amount.is_finite():
        raise ValidationError(f"{field_name} must be a number")
    if positive and amount <= 0:
        raise ValidationError(f"{field_name} must be positive")
    if amount < 0:
        raise ValidationError(f"{field_name} cannot be negative")
    return amount.quantize(Decimal("0.01"))


def optional_amount(value: Any, field_name: str, *, default: Optional[Decimal] = None) -> Optional[Decimal]:
    if value is None:
        return default
    return require_amount(value, field_name)


def optional_coordinate(value: Any, field_name: str) -> Optional[float]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
