from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import NotificationType
from .model import Notification


class NotificationRepository(Protocol):
    def create(self, *, user_id: int, title: str, message: str, type: NotificationType) -> int:
        raise NotImplementedError

    def list_for_user(self, user_id: int) -> Sequence[Notification]:
        raise NotImplementedError

    def get_for_user(self, *, notification_id: int, user_id: int) -> Optional[Notification]:
        raise NotImplementedError

    def mark_read(self, *, notification_id: int, user_id: int) -> bool:
        """Only touches the row when it belongs to ``user_id``."""

        raise NotImplementedError
