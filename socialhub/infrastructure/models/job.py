"""SQLAlchemy model for cron scheduled jobs."""

from sqlalchemy import Boolean, Column, DateTime, String, Text, Uuid

from socialhub.infrastructure.database import Base


class JobModel(Base):
    """Database representation of a scheduled job."""

    __tablename__ = "job"

    id = Column(Uuid, primary_key=True)
    name = Column(String(100), nullable=False, unique=True)
    cron_expr = Column(String(100), nullable=False)
    handler = Column(String(100), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    last_run_at = Column(DateTime(), nullable=True)
    last_error = Column(Text, nullable=True)
    created_at = Column(DateTime(), nullable=False)


__all__ = ["JobModel"]
