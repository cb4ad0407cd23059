"""
In-memory repository adapter - Implements AccountRepository protocol.

Process-local account store for development and tests. Mirrors the
transactional behaviour the domain relies on from PostgreSQL:
staged inserts stay invisible until commit, and an email that is
committed or reserved by an open transaction cannot be inserted again.
"""

import threading
from dataclasses import replace
from datetime import datetime, timezone
from types import TracebackType

from src.domain.exceptions import EmailAlreadyInUse
from src.domain.ports import Account


class InMemoryAccountTransaction:
    """Implements AccountTransaction protocol against InMemoryAccountRepository."""

    def __init__(self, repository: "InMemoryAccountRepository") -> None:
        self._repository = repository
        self._staged: Account | None = None
        self._finished = False

    def __enter__(self) -> "InMemoryAccountTransaction":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if not self._finished:
            self.rollback()

    def insert_pending_account(
        self, username: str, email: str, password_hash: str, activation_token: str
    ) -> int:
        self._staged = self._repository._stage(
            username, email, password_hash, activation_token
        )
        return self._staged.id

    def commit(self) -> None:
        if self._staged is not None:
            self._repository._publish(self._staged)
        self._finished = True

    def rollback(self) -> None:
        if self._finished:
            return
        if self._staged is not None:
            self._repository._release(self._staged)
            self._staged = None
        self._finished = True


class InMemoryAccountRepository:
    """
    Thread-safe in-memory account store.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._accounts: dict[int, Account] = {}
        self._reserved_emails: set[str] = set()
        self._next_id = 1

    def email_in_use(self, email: str) -> bool:
        with self._lock:
            return any(a.email == email for a in self._accounts.values())

    def begin(self) -> InMemoryAccountTransaction:
        return InMemoryAccountTransaction(self)

    def find_by_email(self, email: str) -> Account | None:
        with self._lock:
            return next((a for a in self._accounts.values() if a.email == email), None)

    def find_by_activation_token(self, token: str) -> Account | None:
        with self._lock:
            return next(
                (a for a in self._accounts.values() if a.activation_token == token), None
            )

    def activate(self, token: str) -> bool:
        with self._lock:
            for account in self._accounts.values():
                if account.inactive and account.activation_token == token:
                    self._accounts[account.id] = replace(
                        account, inactive=False, activation_token=None
                    )
                    return True
            return False

    def all(self) -> list[Account]:
        """Snapshot of committed accounts ordered by id."""
        with self._lock:
            return [self._accounts[key] for key in sorted(self._accounts)]

    def ping(self) -> None:
        return None

    def _stage(
        self, username: str, email: str, password_hash: str, activation_token: str
    ) -> Account:
        with self._lock:
            if email in self._reserved_emails:
                raise EmailAlreadyInUse(email)
            self._reserved_emails.add(email)
            account = Account(
                id=self._next_id,
                username=username,
                email=email,
                password_hash=password_hash,
                inactive=True,
                activation_token=activation_token,
                created_at=datetime.now(timezone.utc),
            )
            self._next_id += 1
            return account

    def _publish(self, account: Account) -> None:
        with self._lock:
            self._accounts[account.id] = account

    def _release(self, account: Account) -> None:
        with self._lock:
            self._reserved_emails.discard(account.email)
