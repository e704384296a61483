"""Domain entity representing a device registered for push delivery."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

PUSH_PLATFORMS = ("web", "android", "ios")


@dataclass
class PushSubscription:
    """Firebase Cloud Messaging registration token owned by a user."""

    id: UUID | None
    user_id: UUID
    token: str
    platform: str = "web"
    created_at: datetime | None = None


__all__ = ["PUSH_PLATFORMS", "PushSubscription"]
