"""Composition root: builds the object graph once at startup.

The graph is assembled in phases (infrastructure, repositories, services,
scheduler). ``NotificationService`` and ``PushService`` are built with their
own dependencies first and linked afterwards through
``NotificationService.set_push_service``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial

from sqlalchemy.engine import Engine

from socialhub.application.services import (
    JobService,
    NotificationService,
    NotificationSettingsResolver,
    PushService,
)
from socialhub.config import Settings, get_settings
from socialhub.infrastructure.background import BackgroundDispatcher
from socialhub.infrastructure.database import (
    SessionFactory,
    create_database_engine,
    create_session_factory,
    initialize_database,
)
from socialhub.infrastructure.email import EmailNotifier
from socialhub.infrastructure.fcm import FCMClient
from socialhub.infrastructure.notifications import (
    NotificationConnectionManager,
    NotificationPublisher,
)
from socialhub.infrastructure.repositories import (
    JobRepository,
    NotificationRepository,
    NotificationSettingsRepository,
    PushSubscriptionRepository,
    UserRepository,
)
from socialhub.infrastructure.scheduler import EventScheduler

logger = logging.getLogger(__name__)

PURGE_READ_NOTIFICATIONS = "notifications.purge_read"


@dataclass(frozen=True)
class Infrastructure:
    engine: Engine
    session_factory: SessionFactory
    dispatcher: BackgroundDispatcher
    connections: NotificationConnectionManager
    fcm_client: FCMClient | None
    email_notifier: EmailNotifier
    scheduler: EventScheduler


@dataclass(frozen=True)
class Repositories:
    users: UserRepository
    notifications: NotificationRepository
    notification_settings: NotificationSettingsRepository
    push_subscriptions: PushSubscriptionRepository
    jobs: JobRepository


@dataclass(frozen=True)
class Services:
    settings_resolver: NotificationSettingsResolver
    notifications: NotificationService
    push: PushService
    jobs: JobService


@dataclass(frozen=True)
class Container:
    """Immutable handles to every component, passed down by reference."""

    settings: Settings
    infrastructure: Infrastructure
    repositories: Repositories
    services: Services

    def start(self) -> None:
        """Start the scheduler with the stored active jobs."""

        if not self.settings.scheduler_enabled:
            logger.info("Event scheduler disabled by configuration")
            return

        self.infrastructure.scheduler.start()
        try:
            scheduled = self.services.jobs.schedule_active_jobs()
        except Exception as exc:
            logger.warning("Failed to load existing jobs: %s", exc)
            return
        if scheduled:
            logger.info("Scheduled %s active jobs", scheduled)

    def cleanup(self) -> None:
        """Release resources in the reverse order of construction."""

        logger.info("Starting cleanup...")
        infrastructure = self.infrastructure
        if infrastructure.scheduler.is_running:
            infrastructure.scheduler.stop()
        else:
            logger.info("Event scheduler was already stopped")

        infrastructure.dispatcher.shutdown(wait=True)
        logger.info("Background dispatcher drained")

        if infrastructure.fcm_client is not None:
            try:
                infrastructure.fcm_client.close()
            except Exception as exc:
                logger.warning("Failed to close Firebase app: %s", exc)

        infrastructure.engine.dispose()
        logger.info("Database connections closed")
        logger.info("Cleanup completed")


def _build_infrastructure(
    settings: Settings, *, fcm_client: FCMClient | None = None
) -> Infrastructure:
    engine = create_database_engine(settings)
    initialize_database(engine)
    logger.info("Database connected")

    dispatcher = BackgroundDispatcher(max_workers=settings.push_max_workers)
    if fcm_client is None:
        try:
            fcm_client = FCMClient.from_credentials(settings.firebase_credentials)
        except (OSError, ValueError) as exc:
            logger.warning("Firebase initialization failed; device push disabled: %s", exc)
            fcm_client = None

    return Infrastructure(
        engine=engine,
        session_factory=create_session_factory(engine),
        dispatcher=dispatcher,
        connections=NotificationConnectionManager(),
        fcm_client=fcm_client,
        email_notifier=EmailNotifier(settings, dispatcher),
        scheduler=EventScheduler(),
    )


def _build_repositories(infrastructure: Infrastructure) -> Repositories:
    session_factory = infrastructure.session_factory
    repositories = Repositories(
        users=UserRepository(session_factory),
        notifications=NotificationRepository(session_factory),
        notification_settings=NotificationSettingsRepository(session_factory),
        push_subscriptions=PushSubscriptionRepository(session_factory),
        jobs=JobRepository(session_factory),
    )
    logger.info("Repositories initialized")
    return repositories


def _build_services(
    settings: Settings, infrastructure: Infrastructure, repositories: Repositories
) -> Services:
    settings_resolver = NotificationSettingsResolver(repositories.notification_settings)
    notifications = NotificationService(
        repositories.notifications,
        settings_resolver,
        repositories.users,
        email_notifier=infrastructure.email_notifier,
    )
    push = PushService(
        repositories.push_subscriptions,
        infrastructure.dispatcher,
        fcm_client=infrastructure.fcm_client,
        publisher=NotificationPublisher(infrastructure.connections),
    )
    notifications.set_push_service(push)

    jobs = JobService(repositories.jobs, infrastructure.scheduler)
    jobs.register_handler(
        PURGE_READ_NOTIFICATIONS,
        partial(notifications.purge_read_notifications, settings.notification_retention_days),
    )

    services = Services(
        settings_resolver=settings_resolver,
        notifications=notifications,
        push=push,
        jobs=jobs,
    )
    logger.info("Services initialized")
    return services


def build_container(
    settings: Settings | None = None, *, fcm_client: FCMClient | None = None
) -> Container:
    """Assemble every component for ``settings`` (defaults to the environment)."""

    settings = settings or get_settings()
    logger.info("Configuration loaded")
    infrastructure = _build_infrastructure(settings, fcm_client=fcm_client)
    repositories = _build_repositories(infrastructure)
    services = _build_services(settings, infrastructure, repositories)
    return Container(
        settings=settings,
        infrastructure=infrastructure,
        repositories=repositories,
        services=services,
    )


__all__ = [
    "Container",
    "Infrastructure",
    "PURGE_READ_NOTIFICATIONS",
    "Repositories",
    "Services",
    "build_container",
]
