"""
PostgreSQL repository adapter - Implements AccountRepository protocol.

This module provides the PostgreSQL implementation of the domain's
repository port using psycopg3 with raw SQL.

Concurrency Design - Optimistic Versioning:
-------------------------------------------
Every account row carries a version counter. save() never blindly
overwrites a row:

1. **Insert (version 0)**: INSERT ... ON CONFLICT (identifier) DO NOTHING.
   The primary key on identifier guarantees that of two concurrent
   registrations exactly one inserts; the other sees rowcount 0.

2. **Update (version n)**: UPDATE ... WHERE identifier = %s AND version = n.
   Two concurrent resends that both read version n race on this
   statement; the loser matches no row and gets StaleAccount, then
   re-reads and hits the cooldown.

3. **Token uniqueness**: a partial unique index on verification_token
   rejects a colliding token with UniqueViolation.

CHECK constraints in the migration mirror the token/expiry pairing and
the "verified accounts hold no token" invariant.
"""

import logging
from dataclasses import replace
from pathlib import Path

from psycopg import errors
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from src.domain.exceptions import DuplicateIdentifier, DuplicateVerificationToken, StaleAccount
from src.domain.models import Account

logger = logging.getLogger(__name__)

_COLUMNS = """
    identifier, credential_hash, verified, verification_token,
    token_expiry, last_notification_time, version
"""


class PostgresAccountRepository:
    """
    Implements AccountRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def find_by_identifier(self, identifier: str) -> Account | None:
        sql = f"SELECT {_COLUMNS} FROM accounts WHERE identifier = %s"
        return self._fetch_one(sql, (identifier,))

    def find_by_verification_token(self, token: str) -> Account | None:
        sql = f"SELECT {_COLUMNS} FROM accounts WHERE verification_token = %s"
        return self._fetch_one(sql, (token,))

    def save(self, account: Account) -> Account:
        """
        Insert (version 0) or conditionally update an account.

        Returns:
            The account with its new version

        Raises:
            DuplicateIdentifier: identifier already registered
            DuplicateVerificationToken: token held by another account
            StaleAccount: row version moved on since the account was read
        """
        insert_sql = """
            INSERT INTO accounts (identifier, credential_hash, verified, verification_token,
                                  token_expiry, last_notification_time, version)
            VALUES (%s, %s, %s, %s, %s, %s, 1)
            ON CONFLICT (identifier) DO NOTHING
        """

        update_sql = """
            UPDATE accounts
            SET credential_hash = %s,
                verified = %s,
                verification_token = %s,
                token_expiry = %s,
                last_notification_time = %s,
                version = version + 1,
                updated_at = NOW()
            WHERE identifier = %s AND version = %s
        """

        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                if account.version == 0:
                    cursor.execute(
                        insert_sql,
                        (
                            account.identifier,
                            account.credential_hash,
                            account.verified,
                            account.verification_token,
                            account.token_expiry,
                            account.last_notification_time,
                        ),
                    )
                    if cursor.rowcount != 1:
                        conn.rollback()
                        raise DuplicateIdentifier(account.identifier)
                else:
                    cursor.execute(
                        update_sql,
                        (
                            account.credential_hash,
                            account.verified,
                            account.verification_token,
                            account.token_expiry,
                            account.last_notification_time,
                            account.identifier,
                            account.version,
                        ),
                    )
                    if cursor.rowcount != 1:
                        conn.rollback()
                        raise StaleAccount(account.identifier)
                conn.commit()
        except errors.UniqueViolation as e:
            raise DuplicateVerificationToken(account.identifier) from e

        return replace(account, version=account.version + 1)

    def _fetch_one(self, sql: str, params: tuple) -> Account | None:
        with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
            cursor.execute(sql, params)
            row = cursor.fetchone()
        return Account(**row) if row is not None else None


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning("Migrations directory not found: %s", migrations_dir)
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info("Running %d migration(s)", len(sql_files))

    for sql_file in sql_files:
        logger.info("Executing migration: %s", sql_file.name)
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info("Migration complete: %s", sql_file.name)
        except Exception as e:
            logger.error("Migration failed: %s - %s", sql_file.name, e)
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
