from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.datetime_utils import Clock, SystemClock
from ..core.constants import RECENT_NOTIFICATIONS_LIMIT
from ..core.enums import NotificationType
from ..core.exceptions import NotFoundError, ValidationError
from .model import Notification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)

MAX_NOTIFICATIONS = 100


class NotificationService:
    def __init__(self, notifications: NotificationRepository, *, clock: Clock | None = None):
        self._notifications = notifications
        self._clock = clock or SystemClock()

    def notify(
        self,
        user_id: int,
        *,
        title: str,
        message: str,
        type: NotificationType = NotificationType.INFO,
        link: Optional[str] = None,
    ) -> int:
        notification_id = self._notifications.create(
            user_id=user_id,
            title=title,
            message=message,
            type=type,
            created_at=self._clock.now(),
            link=link,
        )
        logger.debug("Notified user %s: %s", user_id, title)
        return notification_id

    def recent(self, user_id: int, limit: int = RECENT_NOTIFICATIONS_LIMIT) -> Sequence[Notification]:
        return self._notifications.list_for_user(user_id, limit=limit)

    def list_for_user(self, user_id: int, *, unread: Optional[str] = None, limit: Optional[str] = None) -> dict:
        unread_only = (unread or "").strip().lower() in ("1", "true", "yes")
        try:
            n = int(limit) if limit not in (None, "") else 20
        except (TypeError, ValueError):
            raise ValidationError("limit must be an integer")
        if n < 1 or n > MAX_NOTIFICATIONS:
            raise ValidationError(f"limit must be between 1 and {MAX_NOTIFICATIONS}")
        items = self._notifications.list_for_user(user_id, unread_only=unread_only, limit=n)
        return {"notifications": [x.to_dict() for x in items]}

    def mark_read(self, notification_id: int, user_id: int) -> None:
        if not self._notifications.mark_read(notification_id, user_id):
            raise NotFoundError("Notification not found")
