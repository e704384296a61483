"""Firebase Cloud Messaging client used for device push notifications."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import firebase_admin
from firebase_admin import credentials, messaging

logger = logging.getLogger(__name__)

_APP_NAME = "socialhub-push"


class StaleDeviceTokenError(Exception):
    """Firebase reported that the registration token is no longer valid."""

    def __init__(self, token: str) -> None:
        super().__init__("Device token is no longer registered")
        self.token = token


def _load_credentials(raw: str) -> credentials.Certificate:
    """Build a certificate from inline JSON or from a path to a JSON file."""

    stripped = raw.strip()
    if stripped.startswith("{"):
        return credentials.Certificate(json.loads(stripped))
    path = Path(stripped).expanduser()
    if not path.exists():
        msg = f"Firebase credentials file not found at {path}"
        raise FileNotFoundError(msg)
    return credentials.Certificate(str(path))


class FCMClient:
    """Thin wrapper around :mod:`firebase_admin.messaging`."""

    def __init__(self, app: firebase_admin.App) -> None:
        self._app = app

    @classmethod
    def from_credentials(cls, raw_credentials: str | None) -> "FCMClient | None":
        """Return a client for ``raw_credentials`` or ``None`` when push is not configured."""

        if not raw_credentials:
            logger.info("Firebase credentials not configured; device push disabled")
            return None
        try:
            app = firebase_admin.get_app(_APP_NAME)
        except ValueError:
            app = firebase_admin.initialize_app(
                _load_credentials(raw_credentials), name=_APP_NAME
            )
        return cls(app)

    def send(
        self,
        token: str,
        *,
        title: str,
        body: str,
        data: dict[str, Any] | None = None,
    ) -> str:
        """Send a message to ``token`` and return the Firebase message id."""

        message = messaging.Message(
            token=token,
            notification=messaging.Notification(title=title, body=body),
            data={key: str(value) for key, value in (data or {}).items() if value is not None},
        )
        try:
            return messaging.send(message, app=self._app)
        except messaging.UnregisteredError as exc:
            raise StaleDeviceTokenError(token) from exc

    def close(self) -> None:
        firebase_admin.delete_app(self._app)


__all__ = ["FCMClient", "StaleDeviceTokenError"]
