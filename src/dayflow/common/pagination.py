from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Optional

from ..core.constants import MAX_PAGE_SIZE
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class PageRequest:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def describe(self, total: int) -> dict:
        return {
            "total": int(total),
            "page": self.page,
            "limit": self.limit,
            "totalPages": math.ceil(total / self.limit) if self.limit else 0,
        }


def _as_int(value: Any, field_name: str, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")


def page_request(page: Optional[Any], limit: Optional[Any], *, default_limit: int) -> PageRequest:
    """Build a 1-based page request from raw query values."""
    p = _as_int(page, "page", 1)
    n = _as_int(limit, "limit", default_limit)
    if p < 1:
        raise ValidationError("page must be >= 1")
    if n < 1 or n > MAX_PAGE_SIZE:
        raise ValidationError(f"limit must be between 1 and {MAX_PAGE_SIZE}")
    return PageRequest(page=p, limit=n)
