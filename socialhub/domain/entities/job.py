"""Domain entity representing a scheduled background job."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass
class Job:
    """A registered handler executed according to a crontab expression."""

    id: UUID | None
    name: str
    cron_expr: str
    handler: str
    is_active: bool = True
    last_run_at: datetime | None = None
    last_error: str | None = None
    created_at: datetime | None = None


__all__ = ["Job"]
