"""SQLAlchemy model for push notification device registrations."""

from sqlalchemy import Column, DateTime, String, Uuid

from socialhub.infrastructure.database import Base


class PushSubscriptionModel(Base):
    """Database representation of a Firebase registration token."""

    __tablename__ = "push_subscription"

    id = Column(Uuid, primary_key=True)
    user_id = Column(Uuid, nullable=False, index=True)
    token = Column(String(512), nullable=False, unique=True)
    platform = Column(String(20), nullable=False, default="web")
    created_at = Column(DateTime(), nullable=False)


__all__ = ["PushSubscriptionModel"]
