"""
Registration domain service - Verification lifecycle implementation.

This module contains the core business logic for account registration
and email verification.

Verification Lifecycle
======================

States:
- UNVERIFIED (token pending): created by register(), token refreshed by
  resend_verification()
- VERIFIED: terminal, reached by redeeming an unexpired token

Transitions:
    (none)     -> UNVERIFIED  register()
    UNVERIFIED -> UNVERIFIED  resend_verification() (new token, old one dies)
    UNVERIFIED -> VERIFIED    verify() with the current, unexpired token

An expired token is reported as VerifyResult.EXPIRED and left in place;
the next resend overwrites it. Only one token is live per account.

Timing windows are independent: token_ttl bounds redemption,
resend_cooldown throttles notification volume.

Concurrency: every read-check-write goes through the repository's
versioned save(). A StaleAccount conflict means another request won the
race, so the decision is re-evaluated against a fresh read.
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime

from .credentials import normalize_identifier
from .exceptions import (
    AlreadyRegistered,
    ConcurrentUpdate,
    CooldownActive,
    DuplicateIdentifier,
    DuplicateVerificationToken,
    InvalidToken,
    NotFound,
    StaleAccount,
)
from .models import Account, VerificationPolicy, VerificationRequested
from .ports import (
    AccountRepository,
    Clock,
    CredentialVerifier,
    TokenIssuer,
    VerificationEventPublisher,
    VerifyResult,
)

logger = logging.getLogger(__name__)

REGISTERED_MESSAGE = "User registered successfully. Please check your email for verification."
VERIFIED_MESSAGE = "Account verified successfully. You can now login."
EXPIRED_MESSAGE = "Token expired. Please login to receive a new verification email."
RESENT_MESSAGE = "Verification email sent successfully."
ALREADY_VERIFIED_MESSAGE = "Account is already verified."


@dataclass
class RegistrationService:
    """
    Domain service for the verification lifecycle.

    Orchestrates registration, token redemption and resend with cooldown.
    Notification delivery is handed to the publisher and never awaited.
    """

    repository: AccountRepository
    credentials: CredentialVerifier
    token_issuer: TokenIssuer
    publisher: VerificationEventPublisher
    clock: Clock
    policy: VerificationPolicy = field(default_factory=VerificationPolicy)

    def register(self, identifier: str, secret: str) -> str:
        """
        Register a new, unverified account and request a verification email.

        Args:
            identifier: User's email address (will be normalized)
            secret: User's password (will be hashed)

        Returns:
            Confirmation message (the token is never returned)

        Raises:
            AlreadyRegistered: If an account already exists for the identifier
        """
        identifier = normalize_identifier(identifier)
        if self.repository.find_by_identifier(identifier) is not None:
            raise AlreadyRegistered(identifier)

        account = Account(
            identifier=identifier,
            credential_hash=self.credentials.hash_secret(secret),
        )
        try:
            self._issue_token_and_save(account)
        except DuplicateIdentifier:
            # Lost an insert race against a concurrent registration
            raise AlreadyRegistered(identifier) from None

        logger.info("Registered account %s", identifier)
        return REGISTERED_MESSAGE

    def verify(self, token: str) -> VerifyResult:
        """
        Redeem a verification token.

        Returns:
            VerifyResult.VERIFIED on success, VerifyResult.EXPIRED when the
            token is past its expiry (account left untouched)

        Raises:
            InvalidToken: If no account holds this token
        """
        if not token:
            raise InvalidToken()

        for _ in range(self.policy.max_save_attempts):
            account = self.repository.find_by_verification_token(token)
            if account is None:
                raise InvalidToken()

            if account.token_expired(self.clock.now()):
                logger.info("Expired verification token presented for %s", account.identifier)
                return VerifyResult.EXPIRED

            account.mark_verified()
            try:
                self.repository.save(account)
            except StaleAccount:
                continue

            logger.info("Verified account %s", account.identifier)
            return VerifyResult.VERIFIED

        raise ConcurrentUpdate(token)

    def resend_verification(self, identifier: str) -> str:
        """
        Issue a fresh verification token, subject to the resend cooldown.

        Raises:
            NotFound: If no account exists for the identifier
            CooldownActive: If the last notification is younger than the cooldown
        """
        identifier = normalize_identifier(identifier)

        for _ in range(self.policy.max_save_attempts):
            account = self.repository.find_by_identifier(identifier)
            if account is None:
                raise NotFound()
            if account.verified:
                return ALREADY_VERIFIED_MESSAGE

            self._check_cooldown(account, self.clock.now())
            try:
                self._issue_token_and_save(account)
            except StaleAccount:
                # A concurrent resend or verify got there first; decide again
                continue

            logger.info("Resent verification for %s", identifier)
            return RESENT_MESSAGE

        raise ConcurrentUpdate(identifier)

    def message_for(self, result: VerifyResult) -> str:
        if result is VerifyResult.VERIFIED:
            return VERIFIED_MESSAGE
        return EXPIRED_MESSAGE

    def _check_cooldown(self, account: Account, now: datetime) -> None:
        if account.last_notification_time is None:
            return
        remaining = account.last_notification_time + self.policy.resend_cooldown - now
        if remaining.total_seconds() > 0:
            raise CooldownActive(math.ceil(remaining.total_seconds() / 60))

    def _issue_token_and_save(self, account: Account) -> Account:
        """
        Attach a fresh token, persist, then publish the verification request.

        A token collision with another account is retried with a new token.
        StaleAccount and DuplicateIdentifier propagate to the caller.
        """
        for _ in range(self.policy.max_save_attempts):
            account.issue_token(
                self.token_issuer.new_verification_token(),
                self.clock.now(),
                self.policy.token_ttl,
            )
            try:
                saved = self.repository.save(account)
            except DuplicateVerificationToken:
                logger.warning("Verification token collision for %s", account.identifier)
                continue
            self._publish(saved)
            return saved

        raise ConcurrentUpdate(account.identifier)

    def _publish(self, account: Account) -> None:
        event = VerificationRequested(
            identifier=account.identifier,
            verification_token=account.verification_token or "",
        )
        try:
            self.publisher.publish(event)
        except Exception:
            # The account is already persisted; delivery problems stay out of band
            logger.exception("Failed to schedule verification email for %s", account.identifier)
