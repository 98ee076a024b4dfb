from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import NotificationType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Notification
from .repository import NotificationRepository


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO notifications(user_id, title, message, type, link, created_at)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(user_id), title, message, type.value, link, created_at),
            )
            return int(cur.lastrowid)

    def list_for_user(self, user_id: int, *, unread_only: bool = False, limit: int = 20) -> Sequence[Notification]:
        unread = "AND is_read=0" if unread_only else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT notification_id, user_id, title, message, type, is_read, link, created_at
                FROM notifications
                WHERE user_id=%s {unread}
                ORDER BY created_at DESC, notification_id DESC
                LIMIT %s
                """,
                (int(user_id), int(limit)),
            )
            return [
                Notification(
                    notification_id=int(r["notification_id"]),
                    user_id=int(r["user_id"]),
                    title=r["title"],
                    message=r["message"],
                    type=NotificationType(r["type"]),
                    read=bool(r["is_read"]),
                    link=r.get("link"),
                    created_at=r["created_at"],
                )
                for r in fetchall(cur)
            ]

    def mark_read(self, notification_id: int, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT 1 FROM notifications WHERE notification_id=%s AND user_id=%s",
                (int(notification_id), int(user_id)),
            )
            if not cur.fetchall():
                return False
            cur.execute("UPDATE notifications SET is_read=1 WHERE notification_id=%s", (int(notification_id),))
            return True
