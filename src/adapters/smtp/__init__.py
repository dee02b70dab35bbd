"""Email sender adapters - Console and SMTP delivery."""

from .console import ConsoleEmailSender
from .mailer import SmtpEmailSender

__all__ = ["ConsoleEmailSender", "SmtpEmailSender"]
