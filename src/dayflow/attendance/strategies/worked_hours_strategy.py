from __future__ import annotations

from ...core.constants import FULL_DAY_HOURS, HALF_DAY_HOURS
from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class WorkedHoursStrategy(AttendanceStrategy):
    """Check-in marks Present; check-out re-derives status from worked hours.

    Below ``half_day_hours`` the current status is kept: a short day is never
    demoted.
    """

    def __init__(self, *, full_day_hours: float = FULL_DAY_HOURS, half_day_hours: float = HALF_DAY_HOURS):
        if half_day_hours > full_day_hours:
            raise ValueError("half_day_hours must not exceed full_day_hours")
        self._full = float(full_day_hours)
        self._half = float(half_day_hours)

    def decide_checkin(self) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT)

    def decide_checkout(self, *, hours: float, current: AttendanceStatus) -> StatusDecision:
        if hours >= self._full:
            return StatusDecision(status=AttendanceStatus.PRESENT)
        if hours >= self._half:
            return StatusDecision(status=AttendanceStatus.HALF_DAY)
        return StatusDecision(status=current)
