"""
Domain exceptions - Semantic error types for account registration.

This module defines domain-specific exceptions raised by adapters
and the domain service without leaking infrastructure details.
Expected outcomes (invalid input, failed delivery, unknown token) are
returned as result values instead, see ports.RegistrationResult.
"""


class AccountError(Exception):
    """Base class for account domain errors."""

    pass


class EmailAlreadyInUse(AccountError):
    """The store already holds an account (committed or in flight) for this email."""

    pass


class EmailDeliveryFailed(AccountError):
    """The activation email could not be handed to the mail transport."""

    pass


class RollbackFailed(AccountError):
    """A pending account could not be rolled back after a failed delivery."""

    pass
