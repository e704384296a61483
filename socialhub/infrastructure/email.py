"""Email delivery of notifications via SendGrid."""

from __future__ import annotations

import html
import json
import logging
from typing import Any

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from socialhub.config import Settings
from socialhub.domain.entities import Notification
from socialhub.infrastructure.background import BackgroundDispatcher

logger = logging.getLogger(__name__)

_SUBJECTS = {
    "reply": "New reply on SocialHub",
    "mention": "You were mentioned on SocialHub",
    "vote": "Your post received a vote",
    "follow": "You have a new follower",
}
_DEFAULT_SUBJECT = "New notification on SocialHub"


def _extract_sendgrid_error_details(body: Any) -> str | None:
    """Return a human readable description for a SendGrid error payload."""

    if body in (None, ""):
        return None

    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            return None

    if isinstance(body, str):
        body = body.strip()
        if not body:
            return None
        try:
            parsed = json.loads(body)
        except json.JSONDecodeError:
            return body
    else:
        parsed = body

    if isinstance(parsed, dict):
        errors = parsed.get("errors")
        if isinstance(errors, list):
            messages = [
                str(item["message"])
                for item in errors
                if isinstance(item, dict) and item.get("message")
            ]
            if messages:
                return "; ".join(messages)
        return json.dumps(parsed, default=str)

    return str(parsed)


def send_email(settings: Settings, subject: str, html_content: str, recipient: str) -> bool:
    """Send an email using the configured SendGrid credentials."""

    if not settings.email_enabled:
        logger.info("SendGrid configuration incomplete; skipping email delivery")
        return False

    message = Mail(
        from_email=settings.sendgrid_sender,
        to_emails=recipient,
        subject=subject,
        html_content=html_content,
    )

    try:
        response = SendGridAPIClient(settings.sendgrid_api_key).send(message)
    except Exception as exc:  # pragma: no cover - network failures depend on environment
        details = _extract_sendgrid_error_details(getattr(exc, "body", None))
        logger.error(
            "SendGrid API request failed with status %s: %s",
            getattr(exc, "status_code", None),
            details or exc,
        )
        return False

    status_code = getattr(response, "status_code", None)
    if not isinstance(status_code, int) or not 200 <= status_code < 300:
        details = _extract_sendgrid_error_details(getattr(response, "body", None))
        if details:
            logger.error("SendGrid API responded with status %s: %s", status_code, details)
        else:
            logger.error("SendGrid API responded with status %s", status_code)
        return False

    return True


def render_notification_email(notification: Notification) -> tuple[str, str]:
    """Return the subject and HTML body used to email ``notification``."""

    subject = _SUBJECTS.get(notification.type, _DEFAULT_SUBJECT)
    body = (
        "<p>Hi,</p>"
        f"<p>{html.escape(notification.message)}</p>"
        "<p>You can change which emails you receive from your notification settings.</p>"
    )
    return subject, body


class EmailNotifier:
    """Email notifications to users that opted in, without blocking the caller."""

    def __init__(self, settings: Settings, dispatcher: BackgroundDispatcher) -> None:
        self._settings = settings
        self._dispatcher = dispatcher

    @property
    def is_configured(self) -> bool:
        return self._settings.email_enabled

    def deliver(self, notification: Notification, recipient_email: str) -> None:
        if not self.is_configured:
            logger.debug("Email delivery disabled; notification %s not emailed", notification.id)
            return
        subject, body = render_notification_email(notification)
        self._dispatcher.submit(
            f"email:{notification.id}",
            send_email,
            self._settings,
            subject,
            body,
            recipient_email,
        )


__all__ = ["EmailNotifier", "render_notification_email", "send_email"]
