"""Domain entity representing a user."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass
class User:
    """Reference data about a platform user needed to deliver notifications."""

    id: UUID | None
    username: str
    email: str | None
    created_at: datetime | None = None
