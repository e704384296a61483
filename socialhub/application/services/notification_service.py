"""Notification engine: preference gating, read state and delivery fan-out."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Protocol
from uuid import UUID, uuid4

from socialhub.domain.entities import (
    Notification,
    NotificationPage,
    NotificationSettings,
    NotificationSettingsUpdate,
)
from socialhub.domain.errors import NotificationAccessDeniedError, NotificationNotFoundError
from socialhub.infrastructure.email import EmailNotifier
from socialhub.infrastructure.repositories import NotificationRepository, UserRepository
from socialhub.utils import utcnow

from .settings_resolver import NotificationSettingsResolver

logger = logging.getLogger(__name__)


class PushDelivery(Protocol):
    def deliver(self, notification: Notification) -> None: ...


class NotificationService:
    """Entry point used by other services and by the notifications API."""

    def __init__(
        self,
        notifications: NotificationRepository,
        settings_resolver: NotificationSettingsResolver,
        users: UserRepository,
        *,
        email_notifier: EmailNotifier | None = None,
    ) -> None:
        self._notifications = notifications
        self._settings = settings_resolver
        self._users = users
        self._email = email_notifier
        self._push: PushDelivery | None = None

    def set_push_service(self, push_service: PushDelivery | None) -> None:
        """Bind the push collaborator once both services have been built."""

        self._push = push_service

    def list_notifications(self, user_id: UUID, *, offset: int = 0, limit: int = 20) -> NotificationPage:
        items = list(self._notifications.list_for_user(user_id, offset=offset, limit=limit))
        unread_count = self._notifications.count_unread_for_user(user_id)
        total = self._notifications.count_for_user(user_id)
        return NotificationPage(
            items=items, unread_count=unread_count, total=total, offset=offset, limit=limit
        )

    def list_unread(self, user_id: UUID, *, offset: int = 0, limit: int = 20) -> NotificationPage:
        items = list(self._notifications.list_unread_for_user(user_id, offset=offset, limit=limit))
        unread_count = self._notifications.count_unread_for_user(user_id)
        return NotificationPage(
            items=items, unread_count=unread_count, total=unread_count, offset=offset, limit=limit
        )

    def get_notification(self, notification_id: UUID, user_id: UUID) -> Notification:
        return self._get_owned(notification_id, user_id)

    def mark_as_read(self, notification_id: UUID, user_id: UUID) -> None:
        notification = self._get_owned(notification_id, user_id)
        if notification.is_read:
            return
        self._notifications.mark_as_read(notification_id)

    def mark_all_as_read(self, user_id: UUID) -> None:
        updated = self._notifications.mark_all_as_read(user_id)
        logger.debug("Marked %s notifications as read for user %s", updated, user_id)

    def delete_notification(self, notification_id: UUID, user_id: UUID) -> None:
        self._get_owned(notification_id, user_id)
        self._notifications.delete(notification_id)

    def delete_all_notifications(self, user_id: UUID) -> None:
        deleted = self._notifications.delete_all_for_user(user_id)
        logger.debug("Deleted %s notifications for user %s", deleted, user_id)

    def get_unread_count(self, user_id: UUID) -> int:
        return self._notifications.count_unread_for_user(user_id)

    def purge_read_notifications(self, retention_days: int) -> int:
        """Delete read notifications older than ``retention_days``."""

        cutoff = utcnow() - timedelta(days=retention_days)
        deleted = self._notifications.delete_read_before(cutoff)
        logger.info("Purged %s read notifications created before %s", deleted, cutoff.isoformat())
        return deleted

    def get_settings(self, user_id: UUID) -> NotificationSettings:
        return self._settings.get_or_create(user_id)

    def update_settings(self, user_id: UUID, changes: NotificationSettingsUpdate) -> NotificationSettings:
        return self._settings.update(user_id, changes)

    def create_notification(
        self,
        recipient_id: UUID,
        sender_id: UUID,
        notification_type: str,
        message: str,
        *,
        post_id: UUID | None = None,
        comment_id: UUID | None = None,
    ) -> Notification | None:
        """Persist and deliver a notification unless the recipient opted out.

        Returns ``None`` when the recipient disabled ``notification_type``.
        Delivery problems are logged and never raised.
        """

        settings = self._settings.get_or_create(recipient_id)
        if not settings.allows(notification_type):
            logger.debug(
                "User %s disabled %s notifications; skipping", recipient_id, notification_type
            )
            return None

        notification = self._notifications.create(
            Notification(
                id=uuid4(),
                user_id=recipient_id,
                sender_id=sender_id,
                type=notification_type,
                message=message,
                post_id=post_id,
                comment_id=comment_id,
                is_read=False,
                created_at=utcnow(),
            )
        )

        self._deliver_push(notification)
        if settings.email_notifications:
            self._deliver_email(notification)
        return notification

    def _get_owned(self, notification_id: UUID, user_id: UUID) -> Notification:
        notification = self._notifications.get(notification_id)
        if notification is None:
            raise NotificationNotFoundError(notification_id)
        if notification.user_id != user_id:
            raise NotificationAccessDeniedError(notification_id)
        return notification

    def _deliver_push(self, notification: Notification) -> None:
        if self._push is None:
            return
        try:
            self._push.deliver(notification)
        except Exception:
            logger.exception("Push delivery failed for notification %s", notification.id)

    def _deliver_email(self, notification: Notification) -> None:
        if self._email is None or not self._email.is_configured:
            return
        try:
            recipient = self._users.get(notification.user_id)
            if recipient is None or not recipient.email:
                return
            self._email.deliver(notification, recipient.email)
        except Exception:
            logger.exception("Email delivery failed for notification %s", notification.id)


__all__ = ["NotificationService", "PushDelivery"]
