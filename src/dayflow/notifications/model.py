from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import iso
from ..core.enums import NotificationType


@dataclass(frozen=True)
class Notification:
    notification_id: int
    user_id: int
    title: str
    message: str
    type: NotificationType
    read: bool
    created_at: datetime
    link: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.notification_id,
            "userId": self.user_id,
            "title": self.title,
            "message": self.message,
            "type": self.type.value,
            "read": self.read,
            "link": self.link,
            "createdAt": iso(self.created_at),
        }
