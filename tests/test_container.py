"""Tests for the composition root."""

from __future__ import annotations

from uuid import uuid4

import pytest

from socialhub.config import Settings
from socialhub.container import PURGE_READ_NOTIFICATIONS, build_container


@pytest.fixture()
def container(fake_fcm):
    built = build_container(
        Settings(database_url="sqlite://", scheduler_enabled=True, push_max_workers=1),
        fcm_client=fake_fcm,
    )
    yield built
    built.cleanup()


def test_push_service_is_bound_to_notification_service(container, fake_fcm):
    alice = uuid4()
    container.services.push.subscribe(alice, "alice-phone")

    created = container.services.notifications.create_notification(
        alice, uuid4(), "mention", "B mentioned you"
    )
    container.cleanup()

    assert created is not None
    assert [item["token"] for item in fake_fcm.sent] == ["alice-phone"]
    assert fake_fcm.closed is True


def test_start_schedules_stored_jobs_and_cleanup_stops_scheduler(container):
    jobs = container.services.jobs
    assert PURGE_READ_NOTIFICATIONS in jobs.handler_names
    job = jobs.create_job("purge read notifications", "30 3 * * *", PURGE_READ_NOTIFICATIONS)

    container.start()
    scheduler = container.infrastructure.scheduler
    assert scheduler.is_running
    assert scheduler.has_job(str(job.id))

    container.cleanup()
    assert not scheduler.is_running


def test_scheduler_can_be_disabled(fake_fcm):
    container = build_container(
        Settings(database_url="sqlite://", scheduler_enabled=False), fcm_client=fake_fcm
    )
    try:
        container.start()
        assert not container.infrastructure.scheduler.is_running
    finally:
        container.cleanup()


def test_repositories_share_one_database(container):
    alice = uuid4()
    container.services.notifications.create_notification(alice, uuid4(), "follow", "followed")

    assert container.repositories.notifications.count_for_user(alice) == 1
    assert container.repositories.notification_settings.get_by_user(alice) is not None
