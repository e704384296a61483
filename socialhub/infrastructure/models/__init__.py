"""ORM models used by the application infrastructure."""

from .job import JobModel
from .notification import NotificationModel
from .notification_settings import NotificationSettingsModel
from .push_subscription import PushSubscriptionModel
from .user import UserModel

__all__ = [
    "JobModel",
    "NotificationModel",
    "NotificationSettingsModel",
    "PushSubscriptionModel",
    "UserModel",
]
