"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols.
"""

from datetime import datetime
from enum import Enum
from typing import Protocol

from .models import Account, VerificationRequested


class VerifyResult(str, Enum):
    """
    Outcome of a verification token redemption.

    An unknown token is not an outcome: it raises InvalidToken.
    EXPIRED leaves the account untouched so that the next resend
    overwrites the stale token.
    """

    VERIFIED = "verified"
    EXPIRED = "expired"


class AccountRepository(Protocol):
    """Port interface for account persistence."""

    def find_by_identifier(self, identifier: str) -> Account | None:
        """Return the account for a normalized identifier, or None."""
        ...

    def find_by_verification_token(self, token: str) -> Account | None:
        """Return the account currently holding this exact token, or None."""
        ...

    def save(self, account: Account) -> Account:
        """
        Insert or update an account atomically.

        Accounts with version 0 are inserted; others are updated only if
        the stored version still equals account.version. The returned
        account carries the new version.

        Raises:
            DuplicateIdentifier: insert collided with an existing identifier
            DuplicateVerificationToken: token already held by another account
            StaleAccount: stored version changed since the account was read
        """
        ...


class Clock(Protocol):
    """Port interface for the time source used by every expiry check."""

    def now(self) -> datetime:
        """Return the current time as an aware UTC datetime."""
        ...


class CredentialVerifier(Protocol):
    """Port interface for secret hashing and comparison."""

    def hash_secret(self, secret: str) -> str: ...

    def verify_secret(self, secret: str, credential_hash: str | None) -> bool:
        """
        Compare a secret against a stored hash in constant time.

        A None hash (unknown account) must cost the same as a real
        comparison and always return False.
        """
        ...


class TokenIssuer(Protocol):
    """Port interface for verification and session token creation."""

    def new_verification_token(self) -> str: ...

    def issue_session_token(self, identifier: str) -> str: ...

    def validate_session_token(self, token: str) -> str | None:
        """Return the identifier bound to a valid token, None otherwise."""
        ...


class VerificationEventPublisher(Protocol):
    """Port interface for handing verification requests to delivery."""

    def publish(self, event: VerificationRequested) -> None:
        """Schedule delivery of the event; must not block on or raise from delivery."""
        ...


class EmailSender(Protocol):
    """Port interface for email delivery."""

    def send_verification_link(self, email: str, link: str) -> None:
        """
        Send a verification link to an email address.

        Args:
            email: Recipient email address
            link: Absolute verification URL
        """
        ...
