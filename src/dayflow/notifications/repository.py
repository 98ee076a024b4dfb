from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import NotificationType
from .model import Notification


class NotificationRepository(Protocol):
    def create(
        self,
        *,
        user_id: int,
        title: str,
        message: str,
        type: NotificationType,
        created_at: datetime,
        link: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def list_for_user(self, user_id: int, *, unread_only: bool = False, limit: int = 20) -> Sequence[Notification]:
        """Newest first."""
        raise NotImplementedError

    def mark_read(self, notification_id: int, user_id: int) -> bool:
        """False when the notification does not exist or belongs to someone else."""
        raise NotImplementedError
