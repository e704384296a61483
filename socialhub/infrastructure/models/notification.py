"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import Boolean, Column, DateTime, Index, String, Text, Uuid
from sqlalchemy.sql import expression

from socialhub.infrastructure.database import Base


class NotificationModel(Base):
    """Database representation for user notifications."""

    __tablename__ = "notification"
    __table_args__ = (
        Index("ix_notification_user_created", "user_id", "created_at"),
        Index("ix_notification_user_is_read", "user_id", "is_read"),
    )

    id = Column(Uuid, primary_key=True)
    user_id = Column(Uuid, nullable=False, index=True)
    sender_id = Column(Uuid, nullable=False)
    type = Column(String(50), nullable=False)
    message = Column(Text, nullable=False)
    post_id = Column(Uuid, nullable=True)
    comment_id = Column(Uuid, nullable=True)
    is_read = Column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )
    created_at = Column(DateTime(), nullable=False, index=True)


__all__ = ["NotificationModel"]
