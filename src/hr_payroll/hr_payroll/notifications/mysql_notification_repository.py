from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import NotificationType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Notification
from .repository import NotificationRepository

_SELECT = """
    SELECT n.notification_id, n.recipient_id, n.sender_id, n.title, n.message, n.type,
           n.is_read, n.created_at, n.read_at, s.full_name AS sender_name
    FROM notifications n
    LEFT JOIN users s ON s.user_id = n.sender_id
"""


def _to_notification(r: Dict[str, Any]) -> Notification:
    return Notification(
        notification_id=int(r["notification_id"]),
        recipient_id=int(r["recipient_id"]),
        sender_id=int(r["sender_id"]) if r.get("sender_id") is not None else None,
        title=r["title"],
        message=r["message"],
        type=NotificationType(r["type"]),
        is_read=bool(r.get("is_read")),
        created_at=r["created_at"],
        read_at=r.get("read_at"),
        sender_name=r.get("sender_name"),
    )


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        recipient_id: int,
        sender_id: Optional[int],
        title: str,
        message: str,
        type: NotificationType,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO notifications(recipient_id, sender_id, title, message, type)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (recipient_id, sender_id, title, message, type.value),
            )
            return int(cur.lastrowid)

    def create_many(
        self,
        *,
        recipient_ids: Sequence[int],
        sender_id: Optional[int],
        title: str,
        message: str,
        type: NotificationType,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT INTO notifications(recipient_id, sender_id, title, message, type)
                VALUES(%s,%s,%s,%s,%s)
                """,
                [(int(rid), sender_id, title, message, type.value) for rid in recipient_ids],
            )
            return len(recipient_ids)

    def list_for_recipient(self, recipient_id: int, *, limit: int) -> Sequence[Notification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT
                + """
                WHERE n.recipient_id=%s
                ORDER BY n.created_at DESC, n.notification_id DESC
                LIMIT %s
                """,
                (recipient_id, int(limit)),
            )
            return [_to_notification(r) for r in fetchall(cur)]

    def count_unread(self, recipient_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS cnt FROM notifications WHERE recipient_id=%s AND is_read=0",
                (recipient_id,),
            )
            row = fetchone(cur)
            return int(row["cnt"]) if row else 0

    def mark_read(self, *, notification_id: int, recipient_id: int, read_at: datetime) -> Optional[Notification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE notifications
                SET is_read=1, read_at=%s
                WHERE notification_id=%s AND recipient_id=%s
                """,
                (read_at, notification_id, recipient_id),
            )
            cur.execute(
                _SELECT + " WHERE n.notification_id=%s AND n.recipient_id=%s",
                (notification_id, recipient_id),
            )
            r = fetchone(cur)
            return _to_notification(r) if r else None

    def mark_all_read(self, *, recipient_id: int, read_at: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE notifications
                SET is_read=1, read_at=%s
                WHERE recipient_id=%s AND is_read=0
                """,
                (read_at, recipient_id),
            )
            return int(cur.rowcount)
