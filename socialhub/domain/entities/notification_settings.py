"""Domain entity describing which notifications a user wants to receive."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from datetime import datetime
from uuid import UUID

from .notification import (
    NOTIFICATION_TYPE_FOLLOW,
    NOTIFICATION_TYPE_MENTION,
    NOTIFICATION_TYPE_REPLY,
    NOTIFICATION_TYPE_VOTE,
)

# Notification type -> toggle attribute on NotificationSettings.
TYPE_TOGGLES: dict[str, str] = {
    NOTIFICATION_TYPE_REPLY: "replies",
    NOTIFICATION_TYPE_MENTION: "mentions",
    NOTIFICATION_TYPE_VOTE: "votes",
    NOTIFICATION_TYPE_FOLLOW: "follows",
}


@dataclass
class NotificationSettings:
    """Per-user notification preferences.

    The field defaults are the policy applied to users that never saved their
    preferences.
    """

    user_id: UUID
    replies: bool = True
    mentions: bool = True
    votes: bool = False
    follows: bool = True
    email_notifications: bool = False
    updated_at: datetime | None = None

    @classmethod
    def defaults_for(cls, user_id: UUID, *, updated_at: datetime | None = None) -> "NotificationSettings":
        return cls(user_id=user_id, updated_at=updated_at)

    def allows(self, notification_type: str) -> bool:
        """Return whether a notification of ``notification_type`` should be created.

        Types without a dedicated toggle are always allowed so that new kinds
        of notifications are delivered until a preference exists for them.
        """

        toggle = TYPE_TOGGLES.get(notification_type)
        if toggle is None:
            return True
        return bool(getattr(self, toggle))


@dataclass(frozen=True)
class NotificationSettingsUpdate:
    """Partial change set; ``None`` means "leave the stored value untouched"."""

    replies: bool | None = None
    mentions: bool | None = None
    votes: bool | None = None
    follows: bool | None = None
    email_notifications: bool | None = None

    def apply_to(self, settings: NotificationSettings, *, updated_at: datetime) -> NotificationSettings:
        changes = {
            item.name: getattr(self, item.name)
            for item in fields(self)
            if getattr(self, item.name) is not None
        }
        return replace(settings, **changes, updated_at=updated_at)


__all__ = ["NotificationSettings", "NotificationSettingsUpdate", "TYPE_TOGGLES"]
