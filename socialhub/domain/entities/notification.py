"""Domain entity representing a user notification."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

NOTIFICATION_TYPE_REPLY = "reply"
NOTIFICATION_TYPE_MENTION = "mention"
NOTIFICATION_TYPE_VOTE = "vote"
NOTIFICATION_TYPE_FOLLOW = "follow"


@dataclass
class Notification:
    """Message raised for ``user_id`` because of an action taken by ``sender_id``."""

    id: UUID | None
    user_id: UUID
    sender_id: UUID
    type: str
    message: str
    post_id: UUID | None = None
    comment_id: UUID | None = None
    is_read: bool = False
    created_at: datetime | None = None


@dataclass(frozen=True)
class NotificationPage:
    """A page of notifications together with the counters used for pagination."""

    items: list[Notification]
    unread_count: int
    total: int
    offset: int
    limit: int


__all__ = [
    "NOTIFICATION_TYPE_FOLLOW",
    "NOTIFICATION_TYPE_MENTION",
    "NOTIFICATION_TYPE_REPLY",
    "NOTIFICATION_TYPE_VOTE",
    "Notification",
    "NotificationPage",
]
