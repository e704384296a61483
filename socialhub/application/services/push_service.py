"""Device push and realtime delivery of notifications."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from uuid import UUID

from socialhub.domain.entities import PUSH_PLATFORMS, Notification, PushSubscription
from socialhub.infrastructure.background import BackgroundDispatcher
from socialhub.infrastructure.fcm import FCMClient, StaleDeviceTokenError
from socialhub.infrastructure.notifications import NotificationPublisher
from socialhub.infrastructure.repositories import PushSubscriptionRepository

logger = logging.getLogger(__name__)

_PUSH_TITLES = {
    "reply": "New reply",
    "mention": "You were mentioned",
    "vote": "New vote",
    "follow": "New follower",
}
_DEFAULT_TITLE = "New notification"


class PushService:
    """Manage device registrations and fan notifications out to them."""

    def __init__(
        self,
        subscriptions: PushSubscriptionRepository,
        dispatcher: BackgroundDispatcher,
        *,
        fcm_client: FCMClient | None = None,
        publisher: NotificationPublisher | None = None,
    ) -> None:
        self._subscriptions = subscriptions
        self._dispatcher = dispatcher
        self._fcm = fcm_client
        self._publisher = publisher

    def subscribe(self, user_id: UUID, token: str, platform: str = "web") -> PushSubscription:
        token = token.strip()
        if not token:
            raise ValueError("Device token must not be empty")
        if platform not in PUSH_PLATFORMS:
            raise ValueError(f"Unsupported push platform '{platform}'")
        return self._subscriptions.upsert(
            PushSubscription(id=None, user_id=user_id, token=token, platform=platform)
        )

    def unsubscribe(self, user_id: UUID, token: str) -> bool:
        return self._subscriptions.delete_for_user(user_id, token)

    def list_subscriptions(self, user_id: UUID) -> Sequence[PushSubscription]:
        return self._subscriptions.list_for_user(user_id)

    def deliver(self, notification: Notification) -> None:
        """Publish ``notification`` to live websockets and queue device pushes."""

        if self._publisher is not None:
            self._publisher.dispatch(notification)
        if self._fcm is None:
            return
        self._dispatcher.submit(
            f"push:{notification.id}", self._send_to_devices, notification
        )

    def _send_to_devices(self, notification: Notification) -> int:
        """Send ``notification`` to every device of its recipient; returns the successes."""

        subscriptions = self._subscriptions.list_for_user(notification.user_id)
        if not subscriptions:
            return 0

        title = _PUSH_TITLES.get(notification.type, _DEFAULT_TITLE)
        data = {
            "notification_id": notification.id,
            "type": notification.type,
            "post_id": notification.post_id,
            "comment_id": notification.comment_id,
        }
        delivered = 0
        for subscription in subscriptions:
            try:
                self._fcm.send(subscription.token, title=title, body=notification.message, data=data)
            except StaleDeviceTokenError:
                logger.info("Removing stale push token for user %s", subscription.user_id)
                self._subscriptions.delete_by_token(subscription.token)
            except Exception:
                logger.exception(
                    "Push to device %s failed for notification %s",
                    subscription.id,
                    notification.id,
                )
            else:
                delivered += 1
        return delivered


__all__ = ["PushService"]
