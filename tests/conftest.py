"""Shared fixtures for the test-suite."""

from __future__ import annotations

from typing import Any, Callable
from uuid import UUID, uuid4

import pytest

from socialhub.application.services import NotificationService, NotificationSettingsResolver
from socialhub.config import Settings
from socialhub.domain.entities import Notification, User
from socialhub.infrastructure.database import (
    create_database_engine,
    create_session_factory,
    initialize_database,
)
from socialhub.infrastructure.fcm import StaleDeviceTokenError
from socialhub.infrastructure.repositories import (
    JobRepository,
    NotificationRepository,
    NotificationSettingsRepository,
    PushSubscriptionRepository,
    UserRepository,
)


class RecordingPush:
    """Push collaborator that remembers what it was asked to deliver."""

    def __init__(self) -> None:
        self.delivered: list[Notification] = []

    def deliver(self, notification: Notification) -> None:
        self.delivered.append(notification)


class FailingPush:
    def __init__(self) -> None:
        self.calls = 0

    def deliver(self, notification: Notification) -> None:
        self.calls += 1
        raise RuntimeError("push gateway unavailable")


class InlineDispatcher:
    """Runs submitted work immediately so tests can assert on the outcome."""

    def __init__(self) -> None:
        self.descriptions: list[str] = []

    def submit(self, description: str, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        self.descriptions.append(description)
        return func(*args, **kwargs)


class FakeFCMClient:
    def __init__(self, *, stale_tokens: set[str] | None = None, failing_tokens: set[str] | None = None) -> None:
        self.sent: list[dict[str, Any]] = []
        self.stale_tokens = stale_tokens or set()
        self.failing_tokens = failing_tokens or set()
        self.closed = False

    def send(self, token: str, *, title: str, body: str, data: dict[str, Any] | None = None) -> str:
        if token in self.stale_tokens:
            raise StaleDeviceTokenError(token)
        if token in self.failing_tokens:
            raise RuntimeError("FCM unavailable")
        self.sent.append({"token": token, "title": title, "body": body, "data": data or {}})
        return f"projects/test/messages/{len(self.sent)}"

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def settings() -> Settings:
    return Settings(database_url="sqlite://", scheduler_enabled=False)


@pytest.fixture()
def session_factory(settings: Settings):
    engine = create_database_engine(settings)
    initialize_database(engine)
    yield create_session_factory(engine)
    engine.dispose()


@pytest.fixture()
def notification_repository(session_factory) -> NotificationRepository:
    return NotificationRepository(session_factory)


@pytest.fixture()
def settings_repository(session_factory) -> NotificationSettingsRepository:
    return NotificationSettingsRepository(session_factory)


@pytest.fixture()
def push_subscription_repository(session_factory) -> PushSubscriptionRepository:
    return PushSubscriptionRepository(session_factory)


@pytest.fixture()
def job_repository(session_factory) -> JobRepository:
    return JobRepository(session_factory)


@pytest.fixture()
def user_repository(session_factory) -> UserRepository:
    return UserRepository(session_factory)


@pytest.fixture()
def resolver(settings_repository) -> NotificationSettingsResolver:
    return NotificationSettingsResolver(settings_repository)


@pytest.fixture()
def push() -> RecordingPush:
    return RecordingPush()


@pytest.fixture()
def service(notification_repository, resolver, user_repository, push) -> NotificationService:
    notification_service = NotificationService(notification_repository, resolver, user_repository)
    notification_service.set_push_service(push)
    return notification_service


@pytest.fixture()
def make_user(user_repository) -> Callable[..., UUID]:
    def _make_user(username: str | None = None, email: str | None = None) -> UUID:
        user = user_repository.create(
            User(id=uuid4(), username=username or f"user-{uuid4().hex[:8]}", email=email)
        )
        return user.id

    return _make_user


@pytest.fixture()
def failing_push() -> FailingPush:
    return FailingPush()


@pytest.fixture()
def inline_dispatcher() -> InlineDispatcher:
    return InlineDispatcher()


@pytest.fixture()
def fake_fcm() -> FakeFCMClient:
    return FakeFCMClient()
