"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- A controllable clock
- In-memory repository and wired domain services
- Token and credential adapters with test-friendly settings
"""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from unittest.mock import Mock

import pytest

from src.adapters.repository.memory import InMemoryAccountRepository
from src.adapters.tokens.jwt_issuer import JwtTokenIssuer
from src.domain.authentication import AuthenticationService
from src.domain.credentials import BcryptCredentialVerifier
from src.domain.models import VerificationPolicy
from src.domain.registration import RegistrationService

TEST_JWT_SECRET = "test-secret-key-with-enough-length-for-hs256"


class FakeClock:
    """Implements Clock protocol with manually advanced time."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2026, 1, 15, 12, 0, tzinfo=UTC)

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> None:
        self.current += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def repository() -> InMemoryAccountRepository:
    return InMemoryAccountRepository()


@pytest.fixture
def publisher() -> Mock:
    return Mock()


@pytest.fixture
def credentials() -> BcryptCredentialVerifier:
    # Minimum bcrypt cost keeps the suite fast; production uses >= 10
    return BcryptCredentialVerifier(cost=4)


@pytest.fixture
def token_issuer(clock: FakeClock) -> JwtTokenIssuer:
    return JwtTokenIssuer(secret=TEST_JWT_SECRET, clock=clock)


@pytest.fixture
def registration_service(
    repository: InMemoryAccountRepository,
    credentials: BcryptCredentialVerifier,
    token_issuer: JwtTokenIssuer,
    publisher: Mock,
    clock: FakeClock,
) -> RegistrationService:
    return RegistrationService(
        repository=repository,
        credentials=credentials,
        token_issuer=token_issuer,
        publisher=publisher,
        clock=clock,
        policy=VerificationPolicy(),
    )


@pytest.fixture
def authentication_service(
    registration_service: RegistrationService,
) -> AuthenticationService:
    return AuthenticationService(
        repository=registration_service.repository,
        credentials=registration_service.credentials,
        token_issuer=registration_service.token_issuer,
        registration=registration_service,
    )


@pytest.fixture
def last_token(publisher: Mock) -> Callable[[], str]:
    """Return a getter for the token carried by the most recent publish() call."""

    def getter() -> str:
        return publisher.publish.call_args[0][0].verification_token

    return getter
