from __future__ import annotations

import math
from datetime import date, datetime, timedelta
from typing import Iterator, Optional, Protocol

from ..core.exceptions import ValidationError


class Clock(Protocol):
    """Source of the current time, injected into services."""

    def now(self) -> datetime:
        raise NotImplementedError

    def today(self) -> date:
        raise NotImplementedError


class SystemClock:
    """Local wall-clock time."""

    def now(self) -> datetime:
        return datetime.now()

    def today(self) -> date:
        return self.now().date()


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_date_arg(value: Optional[str], field_name: str) -> Optional[date]:
    """Parse an optional date from a request (query string or JSON body).

    Accepts a plain date or the date part of an ISO timestamp.
    """
    if value is None or value == "":
        return None
    try:
        return parse_iso_date(str(value)[:10])
    except ValueError:
        raise ValidationError(f"{field_name} must be a date (YYYY-MM-DD)")


def inclusive_days(start: date, end: date) -> int:
    """Calendar days in [start, end], both ends counted."""
    return (end - start).days + 1


def iter_days(start: date, end: date) -> Iterator[date]:
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def worked_hours(check_in: datetime, check_out: datetime) -> float:
    """Hours between check-in and check-out, rounded to one decimal place."""
    hours = (check_out - check_in).total_seconds() / 3600
    # half-up, so 8.25 becomes 8.3
    return math.floor(hours * 10 + 0.5) / 10


def month_label(day: date) -> str:
    """Payroll month label, e.g. ``January 2026``."""
    return day.strftime("%B %Y")


def start_of_year(day: date) -> date:
    return day.replace(month=1, day=1)


def start_of_month(day: date) -> date:
    return day.replace(day=1)


def months_back(day: date, months: int) -> date:
    """Same day-of-month ``months`` earlier, clamped to the month length."""
    year = day.year
    month = day.month - months
    while month <= 0:
        month += 12
        year -= 1
    for d in (day.day, 30, 29, 28):
        try:
            return date(year, month, d)
        except ValueError:
            continue
    return date(year, month, 28)


def iso(value) -> Optional[str]:
    return value.isoformat() if value is not None else None
