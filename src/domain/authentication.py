"""
Authentication domain service - Login gate and session validation.

Login couples credential checking with verification-state gating:

1. Credentials are checked first, with exactly one constant-time bcrypt
   comparison whether or not the account exists.
2. A correct secret on an unverified account triggers a resend (subject
   to cooldown) and is refused with AccountNotVerified.
3. Only verified accounts receive a session token.
"""

import logging
from dataclasses import dataclass

from .credentials import normalize_identifier
from .exceptions import (
    AccountNotVerified,
    ConcurrentUpdate,
    CooldownActive,
    InvalidCredentials,
    InvalidSessionToken,
)
from .models import LoginResult
from .ports import AccountRepository, CredentialVerifier, TokenIssuer
from .registration import RegistrationService

logger = logging.getLogger(__name__)

LOGIN_MESSAGE = "Login successful"


@dataclass
class AuthenticationService:
    """Domain service issuing and checking session tokens."""

    repository: AccountRepository
    credentials: CredentialVerifier
    token_issuer: TokenIssuer
    registration: RegistrationService

    def login(self, identifier: str, secret: str) -> LoginResult:
        """
        Authenticate and issue a session token.

        Raises:
            InvalidCredentials: Unknown identifier or wrong secret (same message)
            AccountNotVerified: Correct secret, account not verified yet
        """
        identifier = normalize_identifier(identifier)
        account = self.repository.find_by_identifier(identifier)

        stored_hash = account.credential_hash if account is not None else None
        if not self.credentials.verify_secret(secret, stored_hash) or account is None:
            raise InvalidCredentials()

        if not account.verified:
            try:
                self.registration.resend_verification(identifier)
            except CooldownActive as e:
                logger.warning(
                    "Login by unverified %s, resend skipped (cooldown %d min)",
                    identifier,
                    e.remaining_minutes,
                )
            except ConcurrentUpdate:
                logger.warning("Login by unverified %s, resend lost a concurrent update", identifier)
            raise AccountNotVerified()

        token = self.token_issuer.issue_session_token(identifier)
        logger.info("Login succeeded for %s", identifier)
        return LoginResult(token=token, message=LOGIN_MESSAGE)

    def authenticate(self, token: str) -> str:
        """
        Resolve a bearer session token to its account identifier.

        Raises:
            InvalidSessionToken: If the token fails any check
        """
        identifier = self.token_issuer.validate_session_token(token)
        if identifier is None:
            raise InvalidSessionToken()
        return identifier
