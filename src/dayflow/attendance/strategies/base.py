from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from ...core.enums import AttendanceStatus


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus


class AttendanceStrategy(ABC):
    """Strategy Pattern: how a day's status follows from check-in and check-out.

    Implementations are pure; the service owns the clock and persistence.
    """

    @abstractmethod
    def decide_checkin(self) -> StatusDecision:
        """Status written when the first check-in of the day lands."""
        raise NotImplementedError

    @abstractmethod
    def decide_checkout(self, *, hours: float, current: AttendanceStatus) -> StatusDecision:
        """Status after check-out, given worked ``hours`` and the status held so far."""
        raise NotImplementedError
