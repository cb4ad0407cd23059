"""
PostgreSQL repository adapter - Implements AccountRepository protocol.

This module provides the PostgreSQL implementation of the domain's
repository port using psycopg3 with raw SQL.

Consistency Design:
-------------------
1. **Registration transaction**: begin() checks a connection out of the pool
   and keeps it for the whole validate/insert/notify/commit sequence. The
   pending row is only visible to other sessions after COMMIT, so a rollback
   after a failed email leaves nothing behind.

2. **Email uniqueness**: the UNIQUE constraint on users.email closes the race
   between the validator's pre-check and the insert. A concurrent insert of
   the same email blocks until the first transaction ends and then raises
   UniqueViolation, which is mapped to EmailAlreadyInUse.

3. **Single-use tokens**: activate() is one UPDATE ... WHERE activation_token
   = %s AND inactive, so two concurrent activations with the same token
   cannot both match a row.

4. **State invariant**: CHECK (inactive OR activation_token IS NULL) keeps
   an active account from ever holding a live token.
"""

import logging
from pathlib import Path
from types import TracebackType

import psycopg
from psycopg import errors
from psycopg_pool import ConnectionPool

from src.domain.exceptions import EmailAlreadyInUse, RollbackFailed
from src.domain.ports import Account

logger = logging.getLogger(__name__)

_EMAIL_CONSTRAINT = "users_email_unique"

_ACCOUNT_COLUMNS = (
    "id, username, email, password_hash, inactive, activation_token, created_at"
)


def _row_to_account(row: tuple | None) -> Account | None:
    if row is None:
        return None
    return Account(
        id=row[0],
        username=row[1],
        email=row[2],
        password_hash=row[3],
        inactive=row[4],
        activation_token=row[5],
        created_at=row[6],
    )


class PostgresAccountTransaction:
    """
    Implements AccountTransaction protocol on a single pooled connection.

    The connection is returned to the pool when the context exits; an
    uncommitted transaction is rolled back at that point.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool
        self._conn: psycopg.Connection | None = None
        self._finished = False

    def __enter__(self) -> "PostgresAccountTransaction":
        self._conn = self._pool.getconn()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        conn = self._conn
        if conn is None:
            return
        try:
            if not self._finished and not conn.closed:
                conn.rollback()
        finally:
            self._conn = None
            self._pool.putconn(conn)

    @property
    def _connection(self) -> psycopg.Connection:
        if self._conn is None:
            raise RuntimeError("Transaction used outside of its context")
        return self._conn

    def insert_pending_account(
        self, username: str, email: str, password_hash: str, activation_token: str
    ) -> int:
        """
        Insert an inactive account row without committing.

        Returns:
            Database-assigned account id

        Raises:
            EmailAlreadyInUse: If users.email UNIQUE is violated
        """
        sql = """
            INSERT INTO users (username, email, password_hash, inactive, activation_token)
            VALUES (%s, %s, %s, TRUE, %s)
            RETURNING id
        """

        try:
            with self._connection.cursor() as cursor:
                cursor.execute(sql, (username, email, password_hash, activation_token))
                row = cursor.fetchone()
        except errors.UniqueViolation as e:
            if e.diag.constraint_name != _EMAIL_CONSTRAINT:
                raise
            self._finish_rollback()
            raise EmailAlreadyInUse(email) from e
        return row[0]

    def commit(self) -> None:
        try:
            self._connection.commit()
        except errors.UniqueViolation as e:
            self._finished = True
            raise EmailAlreadyInUse("duplicate email at commit") from e
        self._finished = True

    def rollback(self) -> None:
        """
        Roll back the pending insert.

        Raises:
            RollbackFailed: If the server did not confirm the rollback
        """
        if self._finished:
            return
        try:
            self._connection.rollback()
        except psycopg.Error as e:
            logger.exception("Rollback of pending account failed")
            raise RollbackFailed("pending account could not be rolled back") from e
        self._finished = True

    def _finish_rollback(self) -> None:
        # The failed statement aborted the transaction; clear it before reuse
        self._connection.rollback()
        self._finished = True


class PostgresAccountRepository:
    """
    Implements AccountRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def email_in_use(self, email: str) -> bool:
        sql = "SELECT 1 FROM users WHERE email = %s"

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (email,))
            return cursor.fetchone() is not None

    def begin(self) -> PostgresAccountTransaction:
        return PostgresAccountTransaction(self._pool)

    def find_by_email(self, email: str) -> Account | None:
        sql = f"SELECT {_ACCOUNT_COLUMNS} FROM users WHERE email = %s"

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (email,))
            return _row_to_account(cursor.fetchone())

    def find_by_activation_token(self, token: str) -> Account | None:
        sql = f"SELECT {_ACCOUNT_COLUMNS} FROM users WHERE activation_token = %s"

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (token,))
            return _row_to_account(cursor.fetchone())

    def activate(self, token: str) -> bool:
        """
        Activate the pending account holding this token.

        Clears the token in the same statement, so a token matches
        at most one successful activation.

        Returns:
            True if a row was activated, False otherwise
        """
        sql = """
            UPDATE users
            SET inactive = FALSE, activation_token = NULL
            WHERE activation_token = %s AND inactive = TRUE
        """

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (token,))
            conn.commit()
            return cursor.rowcount == 1

    def ping(self) -> None:
        with self._pool.connection() as conn:
            conn.execute("SELECT 1")


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
        logger.warning(f"Migrations directory not found: {migrations_dir}")
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info(f"Running {len(sql_files)} migration(s)")

    for sql_file in sql_files:
        logger.info(f"Executing migration: {sql_file.name}")
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info(f"Migration complete: {sql_file.name}")
        except Exception as e:
            logger.error(f"Migration failed: {sql_file.name} - {e}")
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
