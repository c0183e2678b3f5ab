from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence, Union

from ..common.validators import require_enum, require_non_empty
from ..core.constants import DEFAULT_NOTIFICATION_LIMIT
from ..core.enums import NotificationType
from ..core.exceptions import NotFoundError, ValidationError
from ..users.repository import UserRepository
from .model import Notification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationService:
    """Use cases: emit and read in-app notifications."""

    def __init__(self, notifications: NotificationRepository, users: UserRepository):
        self._notifications = notifications
        self._users = users

    def notify(
        self,
        *,
        recipient_id: int,
        title: str,
        message: str,
        type: NotificationType,
        sender_id: Optional[int] = None,
    ) -> Optional[int]:
        """Best-effort delivery.

        A storage failure is logged and swallowed here so that the attendance
        or payroll change that triggered it stays committed.
        """
        try:
            return self._notifications.create(
                recipient_id=int(recipient_id),
                sender_id=sender_id,
                title=title,
                message=message,
                type=type,
            )
        except Exception:
            logger.exception("Failed to store %s notification for user %s", type.value, recipient_id)
            return None

    def list_for_user(self, user_id: int, *, limit: int = DEFAULT_NOTIFICATION_LIMIT) -> Sequence[Notification]:
        return self._notifications.list_for_recipient(int(user_id), limit=limit)

    def unread_count(self, user_id: int) -> int:
        return self._notifications.count_unread(int(user_id))

    def mark_read(self, *, user_id: int, notification_id: int, now: Optional[datetime] = None) -> Notification:
        now = now or datetime.now()
        updated = self._notifications.mark_read(
            notification_id=int(notification_id),
            recipient_id=int(user_id),
            read_at=now,
        )
        if not updated:
            raise NotFoundError("Notification not found")
        return updated

    def mark_all_read(self, *, user_id: int, now: Optional[datetime] = None) -> int:
        now = now or datetime.now()
        return self._notifications.mark_all_read(recipient_id=int(user_id), read_at=now)

    def send(
        self,
        *,
        sender_id: int,
        recipients: Union[str, Sequence[int]],
        title: str,
        message: str,
        type: str = NotificationType.SYSTEM.value,
    ) -> int:
        """Admin broadcast to "all" (everyone except the sender) or to a list of ids."""
        title = require_non_empty(title, "Title")
        message = require_non_empty(message, "Message")
        kind = require_enum(NotificationType, type, "notification type")

        if recipients == "all":
            targets = [e.user_id for e in self._users.list_all() if e.user_id != int(sender_id)]
        elif isinstance(recipients, (list, tuple)):
            try:
                targets = list(dict.fromkeys(int(r) for r in recipients))
            except (TypeError, ValueError):
                raise ValidationError("Recipients must be 'all' or an array of user IDs")
            missing = [r for r in targets if not self._users.get_by_id(r)]
            if missing:
                raise NotFoundError(f"Recipient not found: {', '.join(str(r) for r in missing)}")
        else:
            raise ValidationError("Recipients must be 'all' or an array of user IDs")

        if not targets:
            raise ValidationError("No recipients found")

        count = self._notifications.create_many(
            recipient_ids=targets,
            sender_id=int(sender_id),
            title=title,
            message=message,
            type=kind,
        )
        logger.info("User %s sent '%s' to %d recipients", sender_id, title, count)
        return count
