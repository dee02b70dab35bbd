"""
SMTP email sender adapter - Implements EmailSender protocol.

Sends the verification link as a multipart (plain text + HTML) message.
Delivery errors propagate; the notification dispatcher is responsible
for logging and absorbing them.
"""

import logging
import smtplib
from email.message import EmailMessage
from html import escape

logger = logging.getLogger(__name__)

SUBJECT = "Verify Your Email Address"

_TEXT_BODY = """Thank you for registering with us!

Please open the link below to verify your email address:

{link}

This link will expire in {ttl_minutes} minutes.
If you didn't create an account, please ignore this email.
"""

_HTML_BODY = """<!DOCTYPE html>
<html>
<body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
  <h1>Welcome!</h1>
  <p>Thank you for registering with us!</p>
  <p>Please click the link below to verify your email address:</p>
  <p><a href="{link}">Verify My Account</a></p>
  <p>Or copy and paste this link into your browser:</p>
  <p style="word-break: break-all;">{link}</p>
  <p><strong>This link will expire in {ttl_minutes} minutes.</strong></p>
  <p>If you didn't create an account, please ignore this email.</p>
</body>
</html>
"""


class SmtpEmailSender:
    """
    Implements EmailSender protocol via smtplib.

    A new SMTP connection is opened per message, so concurrent background
    tasks never share one.
    """

    def __init__(
        self,
        host: str,
        port: int,
        sender: str,
        username: str | None = None,
        password: str | None = None,
        use_tls: bool = True,
        ttl_minutes: int = 10,
        timeout: float = 10.0,
    ) -> None:
        self._host = host
        self._port = port
        self._sender = sender
        self._username = username
        self._password = password
        self._use_tls = use_tls
        self._ttl_minutes = ttl_minutes
        self._timeout = timeout

    def build_message(self, email: str, link: str) -> EmailMessage:
        message = EmailMessage()
        message["Subject"] = SUBJECT
        message["From"] = self._sender
        message["To"] = email
        message.set_content(_TEXT_BODY.format(link=link, ttl_minutes=self._ttl_minutes))
        message.add_alternative(
            _HTML_BODY.format(link=escape(link), ttl_minutes=self._ttl_minutes),
            subtype="html",
        )
        return message

    def send_verification_link(self, email: str, link: str) -> None:
        message = self.build_message(email, link)
        with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as smtp:
            if self._use_tls:
                smtp.starttls()
            if self._username:
                smtp.login(self._username, self._password or "")
            smtp.send_message(message)
        logger.info("Verification email sent to %s", email)
