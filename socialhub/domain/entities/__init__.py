"""Domain entities exposed by the application."""

from .job import Job
from .notification import (
    NOTIFICATION_TYPE_FOLLOW,
    NOTIFICATION_TYPE_MENTION,
    NOTIFICATION_TYPE_REPLY,
    NOTIFICATION_TYPE_VOTE,
    Notification,
    NotificationPage,
)
from .notification_settings import (
    TYPE_TOGGLES,
    NotificationSettings,
    NotificationSettingsUpdate,
)
from .push_subscription import PUSH_PLATFORMS, PushSubscription
from .user import User

__all__ = [
    "Job",
    "NOTIFICATION_TYPE_FOLLOW",
    "NOTIFICATION_TYPE_MENTION",
    "NOTIFICATION_TYPE_REPLY",
    "NOTIFICATION_TYPE_VOTE",
    "Notification",
    "NotificationPage",
    "NotificationSettings",
    "NotificationSettingsUpdate",
    "TYPE_TOGGLES",
    "PUSH_PLATFORMS",
    "PushSubscription",
    "User",
]
