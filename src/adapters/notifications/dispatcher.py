"""
Notification dispatcher - Implements VerificationEventPublisher protocol.

publish() only schedules delivery as a FastAPI background task; the
task runs after the response has been sent, so the request that
triggered it never waits for the email. Any delivery exception is
logged and dropped in deliver(). It never reaches the request and never
rolls back the account change that was already persisted.

One dispatcher is built per request, bound to that request's
BackgroundTasks.
"""

import logging
from urllib.parse import urlencode

from fastapi import BackgroundTasks

from src.domain.models import VerificationRequested
from src.domain.ports import EmailSender

logger = logging.getLogger(__name__)


def build_verification_link(base_url: str, token: str) -> str:
    """Render <base_url>/verify?token=<token>."""
    return f"{base_url.rstrip('/')}/verify?{urlencode({'token': token})}"


class NotificationDispatcher:
    """
    Background delivery of verification emails.

    Args:
        email_sender: Delivery adapter (console or SMTP)
        base_url: Public URL prefix the verify endpoint is served under
        background_tasks: Tasks run by FastAPI once the response is sent
    """

    def __init__(self, email_sender: EmailSender, base_url: str, background_tasks: BackgroundTasks) -> None:
        self._email_sender = email_sender
        self._base_url = base_url
        self._background_tasks = background_tasks

    def publish(self, event: VerificationRequested) -> None:
        self._background_tasks.add_task(self.deliver, event)
        logger.debug("Scheduled verification email for %s", event.identifier)

    def deliver(self, event: VerificationRequested) -> None:
        """Render and send one verification email, absorbing any failure."""
        link = build_verification_link(self._base_url, event.verification_token)
        try:
            self._email_sender.send_verification_link(event.identifier, link)
        except Exception:
            logger.exception("Failed to deliver verification email to %s", event.identifier)
            logger.info("Verification link for %s: %s", event.identifier, link)
