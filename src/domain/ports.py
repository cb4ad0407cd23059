"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure, plus the value types that cross them.
Adapters implement these protocols.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import TracebackType
from typing import Protocol


@dataclass(frozen=True)
class Account:
    """
    Persisted account row.

    Lifecycle (forward-only):
    - Pending: inactive=True, activation_token set (after committed registration)
    - Active:  inactive=False, activation_token None (after activation)
    """

    id: int
    username: str
    email: str
    password_hash: str
    inactive: bool
    activation_token: str | None
    created_at: datetime | None = None


class RegistrationStatus(Enum):
    """Outcome variants of a registration attempt."""

    CREATED = "created"
    VALIDATION_FAILED = "validation_failed"
    NOTIFICATION_FAILED = "notification_failed"


@dataclass(frozen=True)
class RegistrationResult:
    """
    Result of RegistrationService.register().

    validation_errors is only populated for VALIDATION_FAILED and keeps
    the field order username, email, password.
    """

    status: RegistrationStatus
    validation_errors: dict[str, str] = field(default_factory=dict)

    @classmethod
    def created(cls) -> RegistrationResult:
        return cls(RegistrationStatus.CREATED)

    @classmethod
    def invalid(cls, errors: dict[str, str]) -> RegistrationResult:
        return cls(RegistrationStatus.VALIDATION_FAILED, dict(errors))

    @classmethod
    def notification_failed(cls) -> RegistrationResult:
        return cls(RegistrationStatus.NOTIFICATION_FAILED)


class ActivationResult(Enum):
    """Result of an activation attempt."""

    ACTIVATED = "activated"
    INVALID_TOKEN = "invalid_token"


class AccountTransaction(Protocol):
    """
    Port interface for a single registration write.

    Used as a context manager: leaving the block without commit() or
    rollback() rolls back and releases the underlying resources.
    """

    def insert_pending_account(
        self, username: str, email: str, password_hash: str, activation_token: str
    ) -> int:
        """
        Stage a new inactive account inside the transaction.

        Returns:
            Store-assigned account id

        Raises:
            EmailAlreadyInUse: If another account holds this email
        """
        ...

    def commit(self) -> None:
        """Make the staged account durable and visible."""
        ...

    def rollback(self) -> None:
        """
        Discard the staged account.

        Raises:
            RollbackFailed: If the store could not undo the write
        """
        ...

    def __enter__(self) -> AccountTransaction: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None: ...


class AccountRepository(Protocol):
    """Port interface for account persistence."""

    def email_in_use(self, email: str) -> bool:
        """Return True if a committed account already uses this exact email."""
        ...

    def begin(self) -> AccountTransaction:
        """Open a transaction for a registration write."""
        ...

    def find_by_email(self, email: str) -> Account | None:
        """Point lookup by exact email."""
        ...

    def find_by_activation_token(self, token: str) -> Account | None:
        """Point lookup by exact activation token."""
        ...

    def activate(self, token: str) -> bool:
        """
        Atomically activate the pending account holding this token.

        Sets inactive=False and clears the token in one step, so a token
        can be consumed at most once even under concurrent calls.

        Returns:
            True if an account was activated, False if no pending account
            holds the token
        """
        ...

    def ping(self) -> None:
        """Raise if the store is unreachable."""
        ...


class EmailSender(Protocol):
    """Port interface for email delivery."""

    def send_account_activation(self, email: str, token: str) -> None:
        """
        Send the activation token to the account's email address.

        Raises:
            EmailDeliveryFailed: If the message could not be delivered
        """
        ...
