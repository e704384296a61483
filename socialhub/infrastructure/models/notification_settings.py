"""SQLAlchemy model for per-user notification preferences."""

from sqlalchemy import Boolean, Column, DateTime, Integer, Uuid

from socialhub.infrastructure.database import Base


class NotificationSettingsModel(Base):
    """Database representation of notification preferences, one row per user."""

    __tablename__ = "notification_settings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Uuid, nullable=False, unique=True)
    replies = Column(Boolean, nullable=False, default=True)
    mentions = Column(Boolean, nullable=False, default=True)
    votes = Column(Boolean, nullable=False, default=False)
    follows = Column(Boolean, nullable=False, default=True)
    email_notifications = Column(Boolean, nullable=False, default=False)
    updated_at = Column(DateTime(), nullable=True)


__all__ = ["NotificationSettingsModel"]
