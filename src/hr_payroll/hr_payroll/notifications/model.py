from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import NotificationType


@dataclass(frozen=True)
class Notification:
    notification_id: int
    recipient_id: int
    sender_id: Optional[int]
    title: str
    message: str
    type: NotificationType
    is_read: bool
    created_at: datetime
    read_at: Optional[datetime] = None
    sender_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "notification_id": self.notification_id,
            "recipient_id": self.recipient_id,
            "sender": {"user_id": self.sender_id, "full_name": self.sender_name} if self.sender_id else None,
            "title": self.title,
            "message": self.message,
            "type": self.type.value,
            "is_read": self.is_read,
            "created_at": self.created_at.isoformat(),
            "read_at": self.read_at.isoformat() if self.read_at else None,
        }
