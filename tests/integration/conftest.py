"""
Shared fixtures for integration tests.

The client fixture runs the real lifespan (repository and email sender
selection) with settings taken from the environment.
"""

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from src.api.dependencies import _credential_verifier
from src.api.main import app
from src.config.settings import get_settings


@pytest.fixture
def memory_backend(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Configure an in-memory repository and console email delivery."""
    monkeypatch.setenv("REPOSITORY_BACKEND", "memory")
    monkeypatch.setenv("EMAIL_BACKEND", "console")
    monkeypatch.setenv("BCRYPT_COST", "4")
    monkeypatch.setenv("JWT_SECRET", "integration-secret-key-long-enough-for-hs256")
    get_settings.cache_clear()
    _credential_verifier.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def client(memory_backend: None) -> Generator[TestClient, None, None]:
    """Test client whose context runs app startup and shutdown."""
    with TestClient(app) as test_client:
        yield test_client
