"""
Unit tests for AuthenticationService (login gate).

Verifies credential checking, verified-state gating with resend side
effect, session token issuance and bearer token resolution.
"""

from unittest.mock import Mock, patch

import pytest

from src.domain.authentication import LOGIN_MESSAGE
from src.domain.exceptions import (
    AccountNotVerified,
    ConcurrentUpdate,
    InvalidCredentials,
    InvalidSessionToken,
    InvalidToken,
)


class TestLogin:
    """Tests for login()."""

    def test_full_scenario_register_verify_login(self, registration_service, authentication_service, last_token) -> None:
        """register -> wrong verify -> correct verify -> login yields a session token."""
        registration_service.register("a@x.com", "p1")
        with pytest.raises(InvalidToken):
            registration_service.verify("wrong-token")
        registration_service.verify(last_token())

        result = authentication_service.login("a@x.com", "p1")

        assert result.message == LOGIN_MESSAGE
        assert authentication_service.authenticate(result.token) == "a@x.com"

    def test_login_normalizes_identifier(self, registration_service, authentication_service, last_token) -> None:
        registration_service.register("a@x.com", "p1")
        registration_service.verify(last_token())

        result = authentication_service.login("  A@X.COM ", "p1")
        assert authentication_service.authenticate(result.token) == "a@x.com"

    def test_wrong_secret_raises_invalid_credentials(self, registration_service, authentication_service, last_token) -> None:
        registration_service.register("a@x.com", "p1")
        registration_service.verify(last_token())

        with pytest.raises(InvalidCredentials):
            authentication_service.login("a@x.com", "wrong")

    def test_unknown_identifier_raises_invalid_credentials(self, authentication_service) -> None:
        with pytest.raises(InvalidCredentials):
            authentication_service.login("nobody@x.com", "p1")

    def test_unknown_and_wrong_secret_messages_identical(self, registration_service, authentication_service) -> None:
        """Unknown identifier and wrong secret are indistinguishable by message."""
        registration_service.register("a@x.com", "p1")

        with pytest.raises(InvalidCredentials) as unknown:
            authentication_service.login("nobody@x.com", "p1")
        with pytest.raises(InvalidCredentials) as wrong:
            authentication_service.login("a@x.com", "wrong")

        assert str(unknown.value) == str(wrong.value)

    def test_wrong_secret_on_unverified_account_does_not_resend(
        self, registration_service, authentication_service, publisher, clock
    ) -> None:
        """Credentials are checked before verification state."""
        registration_service.register("a@x.com", "p1")
        clock.advance(minutes=6)

        with pytest.raises(InvalidCredentials):
            authentication_service.login("a@x.com", "wrong")

        assert publisher.publish.call_count == 1

    def test_unverified_login_raises_and_resends(self, registration_service, authentication_service, publisher, clock) -> None:
        """Correct credentials on an unverified account trigger one resend."""
        registration_service.register("a@x.com", "p1")
        clock.advance(minutes=6)

        with pytest.raises(AccountNotVerified):
            authentication_service.login("a@x.com", "p1")

        assert publisher.publish.call_count == 2

    def test_unverified_login_within_cooldown_does_not_resend(
        self, registration_service, authentication_service, publisher, caplog
    ) -> None:
        """Cooldown during login is logged and swallowed; AccountNotVerified still raised."""
        registration_service.register("a@x.com", "p1")

        with pytest.raises(AccountNotVerified):
            authentication_service.login("a@x.com", "p1")

        assert publisher.publish.call_count == 1
        assert "cooldown" in caplog.text

    def test_repeated_unverified_logins_respect_cooldown(
        self, registration_service, authentication_service, publisher, clock
    ) -> None:
        registration_service.register("a@x.com", "p1")
        clock.advance(minutes=6)

        for _ in range(3):
            with pytest.raises(AccountNotVerified):
                authentication_service.login("a@x.com", "p1")

        assert publisher.publish.call_count == 2

    def test_unverified_login_swallows_concurrent_update(self, authentication_service, registration_service) -> None:
        registration_service.register("a@x.com", "p1")
        authentication_service.registration = Mock()
        authentication_service.registration.resend_verification.side_effect = ConcurrentUpdate("a@x.com")

        with pytest.raises(AccountNotVerified):
            authentication_service.login("a@x.com", "p1")

    def test_unknown_identifier_still_runs_bcrypt(self, authentication_service) -> None:
        """A missing account costs one bcrypt comparison, like a wrong password."""
        with patch("src.domain.credentials.bcrypt.checkpw", return_value=True) as checkpw:
            with pytest.raises(InvalidCredentials):
                authentication_service.login("nobody@x.com", "p1")

        checkpw.assert_called_once()


class TestAuthenticate:
    """Tests for authenticate()."""

    def test_garbage_token_raises(self, authentication_service) -> None:
        with pytest.raises(InvalidSessionToken):
            authentication_service.authenticate("not-a-jwt")

    def test_expired_token_raises(self, registration_service, authentication_service, clock, last_token) -> None:
        registration_service.register("a@x.com", "p1")
        registration_service.verify(last_token())
        token = authentication_service.login("a@x.com", "p1").token
        clock.advance(minutes=61)

        with pytest.raises(InvalidSessionToken):
            authentication_service.authenticate(token)
