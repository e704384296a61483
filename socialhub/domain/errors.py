"""Errors raised by the domain and application layers."""

from __future__ import annotations

from uuid import UUID


class NotificationNotFoundError(LookupError):
    """The requested notification does not exist."""

    def __init__(self, notification_id: UUID) -> None:
        super().__init__(f"Notification {notification_id} not found")
        self.notification_id = notification_id


class NotificationAccessDeniedError(PermissionError):
    """The caller is not the recipient of the notification."""

    def __init__(self, notification_id: UUID) -> None:
        super().__init__("unauthorized: not notification owner")
        self.notification_id = notification_id


class SettingsAlreadyExistError(Exception):
    """A settings row for the user was inserted concurrently."""

    def __init__(self, user_id: UUID) -> None:
        super().__init__(f"Notification settings for user {user_id} already exist")
        self.user_id = user_id


class JobNotFoundError(LookupError):
    """The requested job does not exist."""

    def __init__(self, job_id: UUID) -> None:
        super().__init__(f"Job {job_id} not found")
        self.job_id = job_id


__all__ = [
    "JobNotFoundError",
    "NotificationAccessDeniedError",
    "NotificationNotFoundError",
    "SettingsAlreadyExistError",
]
