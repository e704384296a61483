"""Repository implementations for infrastructure layer."""

from .job_repository import JobRepository
from .notification_repository import NotificationRepository
from .notification_settings_repository import NotificationSettingsRepository
from .push_subscription_repository import PushSubscriptionRepository
from .user_repository import UserRepository

__all__ = [
    "JobRepository",
    "NotificationRepository",
    "NotificationSettingsRepository",
    "PushSubscriptionRepository",
    "UserRepository",
]
