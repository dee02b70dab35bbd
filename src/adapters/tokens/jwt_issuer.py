"""
JWT token issuer adapter - Implements TokenIssuer protocol.

Verification tokens are opaque URL-safe random strings (256 bits from
the secrets module). Session tokens are HS256 JWTs carrying the account
identifier (sub), issue time (iat) and expiry (exp).

Validation fails closed: anything that is not a well-formed, correctly
signed, unexpired token with a string subject yields None. Expiry is
checked against the injected clock rather than PyJWT's own wall clock,
so tests can move time.
"""

import logging
import secrets
from datetime import timedelta

import jwt

from src.domain.ports import Clock

logger = logging.getLogger(__name__)

_REQUIRED_CLAIMS = ["sub", "iat", "exp"]


class JwtTokenIssuer:
    """
    Implements TokenIssuer protocol via PyJWT.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(
        self,
        secret: str,
        clock: Clock,
        session_ttl: timedelta = timedelta(minutes=60),
        algorithm: str = "HS256",
    ) -> None:
        """
        Args:
            secret: HMAC signing key
            clock: Time source for iat/exp and expiry checks
            session_ttl: Session token validity window
            algorithm: JWS algorithm, the only one accepted on decode
        """
        self._secret = secret
        self._clock = clock
        self._session_ttl = session_ttl
        self._algorithm = algorithm

    def new_verification_token(self) -> str:
        return secrets.token_urlsafe(32)

    def issue_session_token(self, identifier: str) -> str:
        now = self._clock.now()
        payload = {
            "sub": identifier,
            "iat": int(now.timestamp()),
            "exp": int((now + self._session_ttl).timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def validate_session_token(self, token: str) -> str | None:
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": _REQUIRED_CLAIMS, "verify_exp": False, "verify_iat": False},
            )
        except jwt.PyJWTError as e:
            logger.warning("Rejected session token: %s", e)
            return None

        subject = claims.get("sub")
        expires_at = claims.get("exp")
        if not isinstance(subject, str) or not subject:
            return None
        if not isinstance(expires_at, int | float):
            return None
        if expires_at <= self._clock.now().timestamp():
            logger.warning("Rejected expired session token for %s", subject)
            return None
        return subject
