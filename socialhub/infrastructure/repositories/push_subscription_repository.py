"""Persistence helpers for push notification device registrations."""

from __future__ import annotations

from collections.abc import Sequence
from uuid import UUID, uuid4

from socialhub.domain.entities import PushSubscription
from socialhub.infrastructure.database import SessionFactory
from socialhub.infrastructure.models import PushSubscriptionModel
from socialhub.utils import ensure_utc, to_storage_datetime, utcnow


class PushSubscriptionRepository:
    """Provide CRUD operations for :class:`PushSubscription` objects."""

    def __init__(self, session_factory: SessionFactory) -> None:
        self._session_factory = session_factory

    def list_for_user(self, user_id: UUID) -> Sequence[PushSubscription]:
        with self._session_factory() as session:
            models = (
                session.query(PushSubscriptionModel)
                .filter(PushSubscriptionModel.user_id == user_id)
                .order_by(PushSubscriptionModel.created_at.asc())
                .all()
            )
            return [self._to_entity(model) for model in models]

    def upsert(self, subscription: PushSubscription) -> PushSubscription:
        """Store ``subscription``; an already known token is moved to the new owner."""

        with self._session_factory() as session:
            model = (
                session.query(PushSubscriptionModel)
                .filter(PushSubscriptionModel.token == subscription.token)
                .one_or_none()
            )
            if model is None:
                model = PushSubscriptionModel(
                    id=subscription.id or uuid4(),
                    token=subscription.token,
                    created_at=to_storage_datetime(subscription.created_at or utcnow()),
                )
                session.add(model)
            model.user_id = subscription.user_id
            model.platform = subscription.platform
            session.commit()
            return self._to_entity(model)

    def delete_for_user(self, user_id: UUID, token: str) -> bool:
        with self._session_factory() as session:
            deleted = (
                session.query(PushSubscriptionModel)
                .filter(PushSubscriptionModel.user_id == user_id)
                .filter(PushSubscriptionModel.token == token)
                .delete(synchronize_session=False)
            )
            session.commit()
            return deleted > 0

    def delete_by_token(self, token: str) -> bool:
        with self._session_factory() as session:
            deleted = (
                session.query(PushSubscriptionModel)
                .filter(PushSubscriptionModel.token == token)
                .delete(synchronize_session=False)
            )
            session.commit()
            return deleted > 0

    @staticmethod
    def _to_entity(model: PushSubscriptionModel) -> PushSubscription:
        return PushSubscription(
            id=model.id,
            user_id=model.user_id,
            token=model.token,
            platform=model.platform,
            created_at=ensure_utc(model.created_at),
        )


__all__ = ["PushSubscriptionRepository"]
