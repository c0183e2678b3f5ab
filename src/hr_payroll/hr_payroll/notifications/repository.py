from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import NotificationType
from .model import Notification


class NotificationRepository(Protocol):
    def create(
        self,
        *,
        recipient_id: int,
        sender_id: Optional[int],
        title: str,
        message: str,
        type: NotificationType,
    ) -> int:
        raise NotImplementedError

    def create_many(
        self,
        *,
        recipient_ids: Sequence[int],
        sender_id: Optional[int],
        title: str,
        message: str,
        type: NotificationType,
    ) -> int:
        raise NotImplementedError

    def list_for_recipient(self, recipient_id: int, *, limit: int) -> Sequence[Notification]:
        raise NotImplementedError

    def count_unread(self, recipient_id: int) -> int:
        raise NotImplementedError

    def mark_read(self, *, notification_id: int, recipient_id: int, read_at: datetime) -> Optional[Notification]:
        raise NotImplementedError

    def mark_all_read(self, *, recipient_id: int, read_at: datetime) -> int:
        raise NotImplementedError
