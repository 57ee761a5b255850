from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import NotificationType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Notification
from .repository import NotificationRepository


def _row_to_notification(r: Dict[str, Any]) -> Notification:
    return Notification(
        notification_id=int(r["notification_id"]),
        user_id=int(r["user_id"]),
        title=r["title"],
        message=r["message"],
        type=NotificationType(r["type"]),
        is_read=bool(r.get("is_read")),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, user_id: int, title: str, message: str, type: NotificationType) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO notifications(user_id, title, message, type, is_read) VALUES(%s,%s,%s,%s,0)",
                (int(user_id), title, message, type.value),
            )
            return int(cur.lastrowid)

    def list_for_user(self, user_id: int) -> Sequence[Notification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT notification_id, user_id, title, message, type, is_read, created_at, updated_at
                FROM notifications
                WHERE user_id=%s
                ORDER BY created_at DESC, notification_id DESC
                """,
                (int(user_id),),
            )
            return [_row_to_notification(r) for r in fetchall(cur)]

    def get_for_user(self, *, notification_id: int, user_id: int) -> Optional[Notification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT notification_id, user_id, title, message, type, is_read, created_at, updated_at
                FROM notifications
                WHERE notification_id=%s AND user_id=%s
                """,
                (int(notification_id), int(user_id)),
            )
            r = fetchone(cur)
            return _row_to_notification(r) if r else None

    def mark_read(self, *, notification_id: int, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE notifications SET is_read=1 WHERE notification_id=%s AND user_id=%s",
                (int(notification_id), int(user_id)),
            )
            # rowcount is 0 for an already-read row too; the service re-reads to disambiguate.
            return cur.rowcount > 0
