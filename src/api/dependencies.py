"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes, plus the
builders the application lifespan uses to create long-lived adapters.
"""

from datetime import timedelta
from functools import lru_cache

from fastapi import BackgroundTasks, Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from psycopg_pool import ConnectionPool

from src.adapters.notifications.dispatcher import NotificationDispatcher
from src.adapters.repository.memory import InMemoryAccountRepository
from src.adapters.repository.postgres import PostgresAccountRepository
from src.adapters.smtp.console import ConsoleEmailSender
from src.adapters.smtp.mailer import SmtpEmailSender
from src.adapters.tokens.jwt_issuer import JwtTokenIssuer
from src.config.settings import Settings, get_settings
from src.domain.authentication import AuthenticationService
from src.domain.credentials import BcryptCredentialVerifier, SystemClock
from src.domain.exceptions import InvalidSessionToken
from src.domain.ports import AccountRepository, EmailSender, VerificationEventPublisher
from src.domain.registration import RegistrationService

# Module-level singleton - SystemClock is stateless
_clock = SystemClock()


def build_email_sender(settings: Settings) -> EmailSender:
    """Select the email delivery adapter configured by email_backend."""
    if settings.email_backend == "smtp":
        return SmtpEmailSender(
            host=settings.smtp_host,
            port=settings.smtp_port,
            sender=settings.mail_from,
            username=settings.smtp_username,
            password=settings.smtp_password,
            use_tls=settings.smtp_use_tls,
            ttl_minutes=settings.verification_token_ttl_minutes,
        )
    return ConsoleEmailSender()


def build_repository(settings: Settings, pool: ConnectionPool | None) -> AccountRepository:
    """Select the repository adapter configured by repository_backend."""
    if settings.repository_backend == "memory" or pool is None:
        return InMemoryAccountRepository()
    return PostgresAccountRepository(pool)


def get_repository(request: Request) -> AccountRepository:
    """
    Get the account repository from app state.

    The repository is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.repository


def get_publisher(request: Request, background_tasks: BackgroundTasks) -> VerificationEventPublisher:
    """
    Create a dispatcher bound to this request's background tasks.

    Verification emails are sent after the response, using the email
    sender selected at startup.
    """
    return NotificationDispatcher(
        email_sender=request.app.state.email_sender,
        base_url=get_settings().base_url,
        background_tasks=background_tasks,
    )


def get_token_issuer() -> JwtTokenIssuer:
    settings = get_settings()
    return JwtTokenIssuer(
        secret=settings.jwt_secret,
        clock=_clock,
        session_ttl=timedelta(minutes=settings.session_token_ttl_minutes),
        algorithm=settings.jwt_algorithm,
    )


@lru_cache
def _credential_verifier(cost: int) -> BcryptCredentialVerifier:
    return BcryptCredentialVerifier(cost=cost)


def get_credential_verifier() -> BcryptCredentialVerifier:
    """Get the bcrypt verifier (cached per cost; building one hashes a dummy secret)."""
    return _credential_verifier(get_settings().bcrypt_cost)


def get_registration_service(
    request: Request,
    publisher: VerificationEventPublisher = Depends(get_publisher),
) -> RegistrationService:
    """
    Create registration service with injected dependencies.

    Wires together the repository, token issuer and dispatcher for the domain service.
    """
    return RegistrationService(
        repository=get_repository(request),
        credentials=get_credential_verifier(),
        token_issuer=get_token_issuer(),
        publisher=publisher,
        clock=_clock,
        policy=get_settings().verification_policy(),
    )


def get_authentication_service(
    registration: RegistrationService = Depends(get_registration_service),
) -> AuthenticationService:
    """Create authentication service sharing the registration service's adapters."""
    return AuthenticationService(
        repository=registration.repository,
        credentials=registration.credentials,
        token_issuer=registration.token_issuer,
        registration=registration,
    )


# Bearer security scheme for OpenAPI documentation
http_bearer = HTTPBearer(auto_error=False)


def get_current_identifier(
    credentials: HTTPAuthorizationCredentials | None = Depends(http_bearer),
    service: AuthenticationService = Depends(get_authentication_service),
) -> str:
    """
    Resolve the bearer session token to an account identifier.

    Missing, malformed, mis-signed and expired tokens all get the same 401.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return service.authenticate(credentials.credentials)
    except InvalidSessionToken as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        ) from None
