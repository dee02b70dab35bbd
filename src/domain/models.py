"""
Domain models - Plain dataclasses for accounts, policy and results.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta


@dataclass
class Account:
    """
    Identity record.

    Invariants (enforced by RegistrationService and the repositories):
    - verification_token is set iff token_expiry is set
    - a verified account holds no token and no expiry
    - version 0 means the account has never been saved
    """

    identifier: str
    credential_hash: str
    verified: bool = False
    verification_token: str | None = None
    token_expiry: datetime | None = None
    last_notification_time: datetime | None = None
    version: int = 0

    def issue_token(self, token: str, now: datetime, ttl: timedelta) -> None:
        """Replace any pending token with a fresh one and stamp the notification time."""
        self.verification_token = token
        self.token_expiry = now + ttl
        self.last_notification_time = now

    def mark_verified(self) -> None:
        self.verified = True
        self.verification_token = None
        self.token_expiry = None

    def token_expired(self, now: datetime) -> bool:
        return self.token_expiry is not None and self.token_expiry < now


@dataclass(frozen=True)
class VerificationPolicy:
    """Timing windows for the verification lifecycle."""

    token_ttl: timedelta = timedelta(minutes=10)
    resend_cooldown: timedelta = timedelta(minutes=5)
    max_save_attempts: int = 3


@dataclass(frozen=True)
class VerificationRequested:
    """Event: a verification link must be delivered to the account holder."""

    identifier: str
    verification_token: str


@dataclass(frozen=True)
class LoginResult:
    token: str
    message: str
