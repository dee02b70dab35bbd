"""
In-memory repository adapter - Implements AccountRepository protocol.

Intended for local runs and tests. A single lock guards every
compare-and-swap so that the unique constraints (identifier, live
verification token) and the version check hold under concurrent
request threads, mirroring what the PostgreSQL adapter gets from
its constraints and conditional UPDATE.
"""

import threading
from dataclasses import replace

from src.domain.exceptions import DuplicateIdentifier, DuplicateVerificationToken, StaleAccount
from src.domain.models import Account


class InMemoryAccountRepository:
    """
    Implements AccountRepository protocol with a dict keyed by identifier.

    Records are copied on the way in and out; callers never share
    mutable state with the store.
    """

    def __init__(self) -> None:
        self._accounts: dict[str, Account] = {}
        self._by_token: dict[str, str] = {}
        self._lock = threading.Lock()

    def find_by_identifier(self, identifier: str) -> Account | None:
        with self._lock:
            account = self._accounts.get(identifier)
            return replace(account) if account is not None else None

    def find_by_verification_token(self, token: str) -> Account | None:
        with self._lock:
            identifier = self._by_token.get(token)
            if identifier is None:
                return None
            return replace(self._accounts[identifier])

    def save(self, account: Account) -> Account:
        with self._lock:
            current = self._accounts.get(account.identifier)

            if account.version == 0:
                if current is not None:
                    raise DuplicateIdentifier(account.identifier)
            elif current is None or current.version != account.version:
                raise StaleAccount(account.identifier)

            token = account.verification_token
            if token is not None and self._by_token.get(token, account.identifier) != account.identifier:
                raise DuplicateVerificationToken(account.identifier)

            if current is not None and current.verification_token is not None:
                del self._by_token[current.verification_token]
            if token is not None:
                self._by_token[token] = account.identifier

            stored = replace(account, version=account.version + 1)
            self._accounts[account.identifier] = stored
            return replace(stored)
