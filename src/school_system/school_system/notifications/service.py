from __future__ import annotations

import logging
from typing import Iterable, Sequence

from ..core.enums import NotificationType
from ..core.exceptions import NotFoundError
from .model import FanOutResult, Notification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationService:
    """Notification fan-out plus the caller-scoped read operations."""

    def __init__(self, notifications: NotificationRepository):
        self._notifications = notifications

    def notify(
        self,
        recipient_ids: Iterable[int],
        *,
        title: str,
        message: str,
        type: NotificationType = NotificationType.GENERAL,
    ) -> FanOutResult:
        """Create one notification per recipient.

        Every write is attempted even if an earlier one fails; failures are
        collected per recipient in the returned result.
        """

        result = FanOutResult()
        for user_id in dict.fromkeys(int(r) for r in recipient_ids):
            try:
                result.created_ids.append(
                    self._notifications.create(user_id=user_id, title=title, message=message, type=type)
                )
            except Exception as e:
                result.failed[user_id] = str(e) or e.__class__.__name__

        if result.failed:
            logger.warning(
                "notification fan-out %r: %d/%d writes failed (recipients=%s)",
                title,
                len(result.failed),
                result.attempted,
                sorted(result.failed),
            )
        return result

    def list_mine(self, user_id: int) -> Sequence[Notification]:
        return self._notifications.list_for_user(int(user_id))

    def mark_read(self, *, user_id: int, notification_id: int) -> Notification:
        # Someone else's notification is reported as missing, not forbidden.
        existing = self._notifications.get_for_user(notification_id=int(notification_id), user_id=int(user_id))
        if not existing:
            raise NotFoundError("Notification not found")

        if not existing.is_read:
            self._notifications.mark_read(notification_id=existing.notification_id, user_id=int(user_id))

        updated = self._notifications.get_for_user(notification_id=existing.notification_id, user_id=int(user_id))
        return updated or existing
