"""Application services wired together by :mod:`socialhub.container`."""

from .job_service import JobHandler, JobService
from .notification_service import NotificationService, PushDelivery
from .push_service import PushService
from .settings_resolver import NotificationSettingsResolver

__all__ = [
    "JobHandler",
    "JobService",
    "NotificationService",
    "NotificationSettingsResolver",
    "PushDelivery",
    "PushService",
]
