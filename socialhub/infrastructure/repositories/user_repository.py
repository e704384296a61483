"""Persistence layer for user data."""

from __future__ import annotations

from uuid import UUID, uuid4

from socialhub.domain.entities import User
from socialhub.infrastructure.database import SessionFactory
from socialhub.infrastructure.models import UserModel
from socialhub.utils import ensure_utc


class UserRepository:
    """Read access to users; account management lives in the users service."""

    def __init__(self, session_factory: SessionFactory) -> None:
        self._session_factory = session_factory

    def get(self, user_id: UUID) -> User | None:
        with self._session_factory() as session:
            model = session.get(UserModel, user_id)
            return self._to_entity(model) if model else None

    def create(self, user: User) -> User:
        model = UserModel(id=user.id or uuid4(), username=user.username, email=user.email)
        with self._session_factory() as session:
            session.add(model)
            session.commit()
            session.refresh(model)
            return self._to_entity(model)

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            username=model.username,
            email=model.email,
            created_at=ensure_utc(model.created_at),
        )


__all__ = ["UserRepository"]
