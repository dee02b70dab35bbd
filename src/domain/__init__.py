"""
Domain layer - Pure business logic with zero framework imports.

This package contains the core business logic for the email-verified
authentication service: the verification lifecycle and the login gate.
It defines its own port interfaces for infrastructure abstraction,
ensuring true hexagonal architecture decoupling.
"""

from .authentication import AuthenticationService
from .exceptions import (
    AccountNotVerified,
    AlreadyRegistered,
    AuthError,
    CooldownActive,
    InvalidCredentials,
    InvalidSessionToken,
    InvalidToken,
    NotFound,
)
from .models import Account, LoginResult, VerificationPolicy, VerificationRequested
from .ports import (
    AccountRepository,
    Clock,
    CredentialVerifier,
    EmailSender,
    TokenIssuer,
    VerificationEventPublisher,
    VerifyResult,
)
from .registration import RegistrationService

__all__ = [
    "Account",
    "AccountNotVerified",
    "AccountRepository",
    "AlreadyRegistered",
    "AuthError",
    "AuthenticationService",
    "Clock",
    "CooldownActive",
    "CredentialVerifier",
    "EmailSender",
    "InvalidCredentials",
    "InvalidSessionToken",
    "InvalidToken",
    "LoginResult",
    "NotFound",
    "RegistrationService",
    "TokenIssuer",
    "VerificationEventPublisher",
    "VerificationPolicy",
    "VerificationRequested",
    "VerifyResult",
]
