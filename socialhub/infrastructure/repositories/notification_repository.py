"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy.orm import Query, Session

from socialhub.domain.entities import Notification
from socialhub.infrastructure.database import SessionFactory
from socialhub.infrastructure.models import NotificationModel
from socialhub.utils import ensure_utc, to_storage_datetime, utcnow


class NotificationRepository:
    """Provide CRUD operations for :class:`Notification` objects."""

    def __init__(self, session_factory: SessionFactory) -> None:
        self._session_factory = session_factory

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel(
            id=notification.id or uuid4(),
            user_id=notification.user_id,
            sender_id=notification.sender_id,
            type=notification.type,
            message=notification.message,
            post_id=notification.post_id,
            comment_id=notification.comment_id,
            is_read=notification.is_read,
            created_at=to_storage_datetime(notification.created_at or utcnow()),
        )
        with self._session_factory() as session:
            session.add(model)
            session.commit()
            return self._to_entity(model)

    def get(self, notification_id: UUID) -> Notification | None:
        with self._session_factory() as session:
            model = session.get(NotificationModel, notification_id)
            return self._to_entity(model) if model else None

    def list_for_user(
        self, user_id: UUID, *, offset: int = 0, limit: int = 20
    ) -> Sequence[Notification]:
        with self._session_factory() as session:
            query = self._newest_first(self._for_user(session, user_id))
            models = query.offset(offset).limit(limit).all()
            return [self._to_entity(model) for model in models]

    def list_unread_for_user(
        self, user_id: UUID, *, offset: int = 0, limit: int = 20
    ) -> Sequence[Notification]:
        with self._session_factory() as session:
            query = self._newest_first(
                self._for_user(session, user_id).filter(NotificationModel.is_read.is_(False))
            )
            models = query.offset(offset).limit(limit).all()
            return [self._to_entity(model) for model in models]

    def count_for_user(self, user_id: UUID) -> int:
        with self._session_factory() as session:
            return self._for_user(session, user_id).count()

    def count_unread_for_user(self, user_id: UUID) -> int:
        with self._session_factory() as session:
            return (
                self._for_user(session, user_id)
                .filter(NotificationModel.is_read.is_(False))
                .count()
            )

    def mark_as_read(self, notification_id: UUID) -> None:
        with self._session_factory() as session:
            session.query(NotificationModel).filter(
                NotificationModel.id == notification_id
            ).update({NotificationModel.is_read: True}, synchronize_session=False)
            session.commit()

    def mark_all_as_read(self, user_id: UUID) -> int:
        with self._session_factory() as session:
            updated = (
                self._for_user(session, user_id)
                .filter(NotificationModel.is_read.is_(False))
                .update({NotificationModel.is_read: True}, synchronize_session=False)
            )
            session.commit()
            return updated

    def delete(self, notification_id: UUID) -> None:
        with self._session_factory() as session:
            session.query(NotificationModel).filter(
                NotificationModel.id == notification_id
            ).delete(synchronize_session=False)
            session.commit()

    def delete_all_for_user(self, user_id: UUID) -> int:
        with self._session_factory() as session:
            deleted = self._for_user(session, user_id).delete(synchronize_session=False)
            session.commit()
            return deleted

    def delete_read_before(self, cutoff: datetime) -> int:
        """Remove read notifications created before ``cutoff``."""

        with self._session_factory() as session:
            deleted = (
                session.query(NotificationModel)
                .filter(NotificationModel.is_read.is_(True))
                .filter(NotificationModel.created_at < to_storage_datetime(cutoff))
                .delete(synchronize_session=False)
            )
            session.commit()
            return deleted

    @staticmethod
    def _for_user(session: Session, user_id: UUID) -> Query:
        return session.query(NotificationModel).filter(NotificationModel.user_id == user_id)

    @staticmethod
    def _newest_first(query: Query) -> Query:
        return query.order_by(NotificationModel.created_at.desc(), NotificationModel.id.desc())

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            user_id=model.user_id,
            sender_id=model.sender_id,
            type=model.type,
            message=model.message,
            post_id=model.post_id,
            comment_id=model.comment_id,
            is_read=bool(model.is_read),
            created_at=ensure_utc(model.created_at),
        )


__all__ = ["NotificationRepository"]
