"""Utility helpers to push notifications to websocket subscribers."""

from __future__ import annotations

from typing import Any

from socialhub.domain.entities import Notification

from .manager import NotificationConnectionManager


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the websocket payload representation for ``notification``."""

    return {
        "id": str(notification.id) if notification.id else None,
        "user_id": str(notification.user_id),
        "sender_id": str(notification.sender_id),
        "type": notification.type,
        "message": notification.message,
        "post_id": str(notification.post_id) if notification.post_id else None,
        "comment_id": str(notification.comment_id) if notification.comment_id else None,
        "is_read": notification.is_read,
        "created_at": notification.created_at.isoformat()
        if notification.created_at
        else None,
    }


class NotificationPublisher:
    """Serialize notifications and schedule their delivery to open websockets."""

    def __init__(self, manager: NotificationConnectionManager) -> None:
        self._manager = manager

    def dispatch(self, notification: Notification) -> bool:
        """Schedule ``notification`` for its recipient; ``False`` if nobody is listening."""

        message = {"type": "notification", "data": serialize_notification(notification)}
        return self._manager.schedule_send(notification.user_id, message)


__all__ = ["NotificationPublisher", "serialize_notification"]
