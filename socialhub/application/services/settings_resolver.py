"""Resolution of per-user notification preferences."""

from __future__ import annotations

import logging
from uuid import UUID

from socialhub.domain.entities import NotificationSettings, NotificationSettingsUpdate
from socialhub.domain.errors import SettingsAlreadyExistError
from socialhub.infrastructure.repositories import NotificationSettingsRepository
from socialhub.utils import utcnow

logger = logging.getLogger(__name__)


class NotificationSettingsResolver:
    """Materialize default preferences lazily and apply partial updates."""

    def __init__(self, repository: NotificationSettingsRepository) -> None:
        self._repository = repository

    def get_or_create(self, user_id: UUID) -> NotificationSettings:
        """Return the stored settings for ``user_id``, persisting defaults on first access."""

        existing = self._repository.get_by_user(user_id)
        if existing is not None:
            return existing

        defaults = NotificationSettings.defaults_for(user_id, updated_at=utcnow())
        try:
            return self._repository.create(defaults)
        except SettingsAlreadyExistError:
            # A concurrent request stored the row first; use theirs.
            logger.debug("Settings for user %s created concurrently; refetching", user_id)
            stored = self._repository.get_by_user(user_id)
            if stored is None:
                raise
            return stored

    def update(self, user_id: UUID, changes: NotificationSettingsUpdate) -> NotificationSettings:
        """Apply the non-``None`` fields of ``changes`` and persist the result.

        A missing row is not created before the update: the defaults are only
        used as the base the changes are applied to.
        """

        current = self._repository.get_by_user(user_id)
        if current is None:
            current = NotificationSettings.defaults_for(user_id)

        try:
            return self._repository.save(changes.apply_to(current, updated_at=utcnow()))
        except SettingsAlreadyExistError:
            stored = self._repository.get_by_user(user_id)
            if stored is None:
                raise
            return self._repository.save(changes.apply_to(stored, updated_at=utcnow()))


__all__ = ["NotificationSettingsResolver"]
