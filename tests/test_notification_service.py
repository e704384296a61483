"""Tests for the notification engine."""

from __future__ import annotations

from datetime import timedelta
from uuid import uuid4

import pytest

from socialhub.application.services import NotificationService
from socialhub.domain.entities import Notification, NotificationSettingsUpdate
from socialhub.domain.errors import NotificationAccessDeniedError, NotificationNotFoundError
from socialhub.utils import utcnow


class RecordingEmailNotifier:
    is_configured = True

    def __init__(self) -> None:
        self.deliveries: list[tuple[Notification, str]] = []

    def deliver(self, notification: Notification, recipient_email: str) -> None:
        self.deliveries.append((notification, recipient_email))


def _store(repository, user_id, *, minutes_ago: int, is_read: bool = False, sender_id=None):
    return repository.create(
        Notification(
            id=uuid4(),
            user_id=user_id,
            sender_id=sender_id or uuid4(),
            type="reply",
            message=f"created {minutes_ago} minutes ago",
            is_read=is_read,
            created_at=utcnow() - timedelta(minutes=minutes_ago),
        )
    )


def test_reply_notification_is_listed_first_and_unread(service, push):
    alice, bob = uuid4(), uuid4()
    post_id, comment_id = uuid4(), uuid4()

    created = service.create_notification(
        alice,
        bob,
        "reply",
        "B replied to your comment",
        post_id=post_id,
        comment_id=comment_id,
    )

    page = service.list_notifications(alice, offset=0, limit=10)
    assert created is not None
    assert page.items[0].id == created.id
    assert page.items[0].is_read is False
    assert page.items[0].post_id == post_id
    assert page.items[0].comment_id == comment_id
    assert page.unread_count == 1
    assert page.total == 1
    assert push.delivered == [created]


def test_disabled_vote_notifications_are_silently_skipped(service, push):
    alice, bob = uuid4(), uuid4()
    service.update_settings(alice, NotificationSettingsUpdate(votes=False))
    before = service.get_unread_count(alice)

    result = service.create_notification(alice, bob, "vote", "B upvoted your post")

    assert result is None
    assert service.get_unread_count(alice) == before
    assert service.list_notifications(alice).total == 0
    assert push.delivered == []


def test_votes_are_off_by_default(service):
    alice = uuid4()

    assert service.create_notification(alice, uuid4(), "vote", "upvoted") is None
    assert service.create_notification(alice, uuid4(), "follow", "followed you") is not None


def test_unknown_notification_types_are_always_delivered(service):
    alice = uuid4()
    service.update_settings(
        alice,
        NotificationSettingsUpdate(replies=False, mentions=False, votes=False, follows=False),
    )

    created = service.create_notification(alice, uuid4(), "mention-in-comment", "hi")

    assert created is not None
    assert created.type == "mention-in-comment"


def test_unread_count_matches_unread_rows(service, notification_repository):
    alice, bob = uuid4(), uuid4()
    for minutes in (1, 2, 3):
        _store(notification_repository, alice, minutes_ago=minutes)
    _store(notification_repository, alice, minutes_ago=4, is_read=True)
    _store(notification_repository, bob, minutes_ago=1)

    assert service.get_unread_count(alice) == 3
    assert service.get_unread_count(bob) == 1


def test_list_notifications_is_newest_first_and_paginated(service, notification_repository):
    alice = uuid4()
    oldest = _store(notification_repository, alice, minutes_ago=30, is_read=True)
    middle = _store(notification_repository, alice, minutes_ago=20)
    newest = _store(notification_repository, alice, minutes_ago=10)

    first_page = service.list_notifications(alice, offset=0, limit=2)
    second_page = service.list_notifications(alice, offset=2, limit=2)

    assert [item.id for item in first_page.items] == [newest.id, middle.id]
    assert [item.id for item in second_page.items] == [oldest.id]
    assert first_page.total == 3
    assert first_page.unread_count == 2
    assert (first_page.offset, first_page.limit) == (0, 2)


def test_list_unread_reports_unread_count_as_total(service, notification_repository):
    alice = uuid4()
    _store(notification_repository, alice, minutes_ago=3, is_read=True)
    unread = _store(notification_repository, alice, minutes_ago=2)

    page = service.list_unread(alice, offset=0, limit=10)

    assert [item.id for item in page.items] == [unread.id]
    assert page.total == page.unread_count == 1


def test_mark_as_read_is_idempotent(service):
    alice = uuid4()
    created = service.create_notification(alice, uuid4(), "mention", "you were mentioned")

    service.mark_as_read(created.id, alice)
    first = service.get_notification(created.id, alice)
    service.mark_as_read(created.id, alice)
    second = service.get_notification(created.id, alice)

    assert first == second
    assert second.is_read is True
    assert service.get_unread_count(alice) == 0


@pytest.mark.parametrize(
    "operation",
    [
        lambda svc, notification_id, user_id: svc.get_notification(notification_id, user_id),
        lambda svc, notification_id, user_id: svc.mark_as_read(notification_id, user_id),
        lambda svc, notification_id, user_id: svc.delete_notification(notification_id, user_id),
    ],
    ids=["get", "mark_as_read", "delete"],
)
def test_other_users_cannot_touch_a_notification(service, operation):
    alice, mallory = uuid4(), uuid4()
    created = service.create_notification(alice, uuid4(), "reply", "reply for alice")

    with pytest.raises(NotificationAccessDeniedError):
        operation(service, created.id, mallory)

    stored = service.get_notification(created.id, alice)
    assert stored.is_read is False
    assert service.list_notifications(alice).total == 1


@pytest.mark.parametrize("method", ["get_notification", "mark_as_read", "delete_notification"])
def test_missing_notification_raises_not_found(service, method):
    with pytest.raises(NotificationNotFoundError):
        getattr(service, method)(uuid4(), uuid4())


def test_delete_notification_removes_only_that_row(service):
    alice = uuid4()
    keep = service.create_notification(alice, uuid4(), "reply", "keep")
    drop = service.create_notification(alice, uuid4(), "reply", "drop")

    service.delete_notification(drop.id, alice)

    remaining = service.list_notifications(alice).items
    assert [item.id for item in remaining] == [keep.id]


def test_bulk_operations_are_scoped_to_the_caller(service):
    alice, bob = uuid4(), uuid4()
    for _ in range(2):
        service.create_notification(alice, bob, "reply", "for alice")
        service.create_notification(bob, alice, "reply", "for bob")

    service.mark_all_as_read(alice)
    assert service.get_unread_count(alice) == 0
    assert service.get_unread_count(bob) == 2

    service.delete_all_notifications(alice)
    assert service.list_notifications(alice).total == 0
    assert service.list_notifications(bob).total == 2


def test_push_failures_do_not_fail_creation(
    notification_repository, resolver, user_repository, failing_push
):
    service = NotificationService(notification_repository, resolver, user_repository)
    service.set_push_service(failing_push)
    alice = uuid4()

    created = service.create_notification(alice, uuid4(), "follow", "B followed you")

    assert created is not None
    assert failing_push.calls == 1
    assert service.get_unread_count(alice) == 1


def test_creation_without_push_service_still_persists(
    notification_repository, resolver, user_repository
):
    service = NotificationService(notification_repository, resolver, user_repository)
    alice = uuid4()

    assert service.create_notification(alice, uuid4(), "reply", "hello") is not None
    assert service.get_unread_count(alice) == 1


def test_email_is_sent_only_to_opted_in_users(
    notification_repository, resolver, user_repository, make_user
):
    notifier = RecordingEmailNotifier()
    service = NotificationService(
        notification_repository, resolver, user_repository, email_notifier=notifier
    )
    opted_in = make_user(email="in@example.com")
    opted_out = make_user(email="out@example.com")
    service.update_settings(opted_in, NotificationSettingsUpdate(email_notifications=True))

    created = service.create_notification(opted_in, uuid4(), "reply", "B replied")
    service.create_notification(opted_out, uuid4(), "reply", "B replied")

    assert notifier.deliveries == [(created, "in@example.com")]


def test_purge_removes_only_old_read_notifications(service, notification_repository):
    alice = uuid4()
    old_read = _store(notification_repository, alice, minutes_ago=60 * 24 * 10, is_read=True)
    old_unread = _store(notification_repository, alice, minutes_ago=60 * 24 * 10)
    recent_read = _store(notification_repository, alice, minutes_ago=5, is_read=True)

    deleted = service.purge_read_notifications(retention_days=7)

    remaining = {item.id for item in service.list_notifications(alice).items}
    assert deleted == 1
    assert old_read.id not in remaining
    assert remaining == {old_unread.id, recent_read.id}
