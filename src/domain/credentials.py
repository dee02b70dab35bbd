"""
Credential verification and clock - default port implementations.

Timing Oracle Prevention
------------------------
verify_secret() always runs bcrypt.checkpw(). When there is no stored
hash (unknown identifier) it compares against a dummy hash generated
with the same cost factor, so "no such account" and "wrong password"
take the same time.
"""

import secrets
from dataclasses import dataclass, field
from datetime import UTC, datetime

import bcrypt

# bcrypt only reads the first 72 bytes; newer releases raise instead of truncating
_BCRYPT_MAX_BYTES = 72


def _encode(secret: str) -> bytes:
    return secret.encode()[:_BCRYPT_MAX_BYTES]


@dataclass
class BcryptCredentialVerifier:
    """
    Implements CredentialVerifier protocol via bcrypt.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    cost: int = 10
    _dummy_hash: bytes = field(init=False, repr=False)

    def __post_init__(self) -> None:
        # Hash of a random throwaway secret at the configured cost
        self._dummy_hash = bcrypt.hashpw(secrets.token_hex(16).encode(), bcrypt.gensalt(self.cost))

    def hash_secret(self, secret: str) -> str:
        """
        Hash a secret using bcrypt at the configured cost factor.
        """
        return bcrypt.hashpw(_encode(secret), bcrypt.gensalt(rounds=self.cost)).decode()

    def verify_secret(self, secret: str, credential_hash: str | None) -> bool:
        stored = credential_hash.encode() if credential_hash else self._dummy_hash
        try:
            matched = bcrypt.checkpw(_encode(secret), stored)
        except ValueError:
            # Corrupt stored hash; still spend the comparison time
            bcrypt.checkpw(_encode(secret), self._dummy_hash)
            return False
        return matched and credential_hash is not None


class SystemClock:
    """Implements Clock protocol with the wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(UTC)


def normalize_identifier(identifier: str) -> str:
    """
    Normalize email address for consistent storage and lookup.

    Applies: strip whitespace + lowercase
    """
    return identifier.strip().lower()
