"""Pydantic schemas exposed by the HTTP API."""

from .notification import (
    NotificationListResponse,
    NotificationRead,
    NotificationSettingsRead,
    NotificationSettingsUpdateRequest,
    PaginationMeta,
    PushSubscriptionCreate,
    PushSubscriptionRead,
    UnreadCountResponse,
)

__all__ = [
    "NotificationListResponse",
    "NotificationRead",
    "NotificationSettingsRead",
    "NotificationSettingsUpdateRequest",
    "PaginationMeta",
    "PushSubscriptionCreate",
    "PushSubscriptionRead",
    "UnreadCountResponse",
]
