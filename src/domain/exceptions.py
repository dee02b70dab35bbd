"""
Domain exceptions - Semantic error types for authentication.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.
All of them are user-facing and recoverable; the API layer maps
each one to an HTTP status.
"""


class AuthError(Exception):
    """Base class for authentication domain errors."""

    pass


class AlreadyRegistered(AuthError):
    """An account with this identifier already exists."""

    pass


class InvalidCredentials(AuthError):
    """Unknown identifier or secret mismatch (deliberately indistinguishable)."""

    def __init__(self) -> None:
        super().__init__("Invalid email or password")


class AccountNotVerified(AuthError):
    """Credentials matched but the account has not been verified yet."""

    def __init__(self) -> None:
        super().__init__("Account not verified. Verification email sent.")


class InvalidToken(AuthError):
    """No account holds this verification token."""

    def __init__(self) -> None:
        super().__init__("Invalid verification token")


class NotFound(AuthError):
    """No account exists for this identifier."""

    def __init__(self) -> None:
        super().__init__("User not found")


class CooldownActive(AuthError):
    """A verification email was sent too recently."""

    def __init__(self, remaining_minutes: int) -> None:
        self.remaining_minutes = remaining_minutes
        super().__init__(
            f"Please wait {remaining_minutes} minute(s) before requesting "
            "a new verification link."
        )


class InvalidSessionToken(AuthError):
    """Bearer session token is malformed, mis-signed or expired."""

    def __init__(self) -> None:
        super().__init__("Invalid or expired session token")


class ConcurrentUpdate(AuthError):
    """The account kept changing underneath us; the caller may retry."""

    pass


class RepositoryConflict(Exception):
    """Base class for unique-constraint and version conflicts raised by repositories."""

    pass


class DuplicateIdentifier(RepositoryConflict):
    """Insert rejected: identifier already taken."""

    pass


class DuplicateVerificationToken(RepositoryConflict):
    """Save rejected: verification token already held by another account."""

    pass


class StaleAccount(RepositoryConflict):
    """Update rejected: the stored version moved on since the account was read."""

    pass
