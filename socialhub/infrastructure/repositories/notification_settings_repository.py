"""Persistence helpers for notification preferences."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy.exc import IntegrityError

from socialhub.domain.entities import NotificationSettings
from socialhub.domain.errors import SettingsAlreadyExistError
from socialhub.infrastructure.database import SessionFactory
from socialhub.infrastructure.models import NotificationSettingsModel
from socialhub.utils import ensure_utc, to_storage_datetime


class NotificationSettingsRepository:
    """Load and store :class:`NotificationSettings`, at most one row per user."""

    def __init__(self, session_factory: SessionFactory) -> None:
        self._session_factory = session_factory

    def get_by_user(self, user_id: UUID) -> NotificationSettings | None:
        with self._session_factory() as session:
            model = (
                session.query(NotificationSettingsModel)
                .filter(NotificationSettingsModel.user_id == user_id)
                .one_or_none()
            )
            return self._to_entity(model) if model else None

    def create(self, settings: NotificationSettings) -> NotificationSettings:
        """Insert ``settings``.

        Raises :class:`SettingsAlreadyExistError` when a row for the same user
        was stored first.
        """

        model = NotificationSettingsModel(user_id=settings.user_id)
        self._apply_entity_to_model(model, settings)
        with self._session_factory() as session:
            session.add(model)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise SettingsAlreadyExistError(settings.user_id) from exc
            return self._to_entity(model)

    def save(self, settings: NotificationSettings) -> NotificationSettings:
        """Update the stored row for ``settings.user_id``, creating it if missing."""

        with self._session_factory() as session:
            model = (
                session.query(NotificationSettingsModel)
                .filter(NotificationSettingsModel.user_id == settings.user_id)
                .one_or_none()
            )
            if model is None:
                model = NotificationSettingsModel(user_id=settings.user_id)
                session.add(model)
            self._apply_entity_to_model(model, settings)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise SettingsAlreadyExistError(settings.user_id) from exc
            return self._to_entity(model)

    @staticmethod
    def _apply_entity_to_model(
        model: NotificationSettingsModel, settings: NotificationSettings
    ) -> None:
        model.replies = settings.replies
        model.mentions = settings.mentions
        model.votes = settings.votes
        model.follows = settings.follows
        model.email_notifications = settings.email_notifications
        model.updated_at = to_storage_datetime(settings.updated_at)

    @staticmethod
    def _to_entity(model: NotificationSettingsModel) -> NotificationSettings:
        return NotificationSettings(
            user_id=model.user_id,
            replies=bool(model.replies),
            mentions=bool(model.mentions),
            votes=bool(model.votes),
            follows=bool(model.follows),
            email_notifications=bool(model.email_notifications),
            updated_at=ensure_utc(model.updated_at),
        )


__all__ = ["NotificationSettingsRepository"]
