"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    sender_id: UUID
    type: str
    message: str
    post_id: UUID | None = None
    comment_id: UUID | None = None
    is_read: bool
    created_at: datetime


class PaginationMeta(BaseModel):
    total: int
    offset: int
    limit: int


class NotificationListResponse(BaseModel):
    """A page of notifications with the counters the client paginates with."""

    notifications: list[NotificationRead]
    unread_count: int
    meta: PaginationMeta


class UnreadCountResponse(BaseModel):
    unread_count: int


class NotificationSettingsRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: UUID
    replies: bool
    mentions: bool
    votes: bool
    follows: bool
    email_notifications: bool
    updated_at: datetime | None = None


class NotificationSettingsUpdateRequest(BaseModel):
    """Partial update; omitted fields keep their stored value."""

    replies: bool | None = None
    mentions: bool | None = None
    votes: bool | None = None
    follows: bool | None = None
    email_notifications: bool | None = None


class PushSubscriptionCreate(BaseModel):
    token: str = Field(..., min_length=1, max_length=512, description="FCM registration token")
    platform: Literal["web", "android", "ios"] = "web"


class PushSubscriptionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    token: str
    platform: str
    created_at: datetime | None = None


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
