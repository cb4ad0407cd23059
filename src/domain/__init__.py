"""
Domain layer - Pure business logic with zero framework imports.

This package contains the core business logic for double-opt-in account
registration. It defines its own port interfaces for infrastructure
abstraction, keeping persistence and email delivery behind adapters.
"""

from .exceptions import AccountError, EmailAlreadyInUse, EmailDeliveryFailed, RollbackFailed
from .ports import (
    Account,
    AccountRepository,
    AccountTransaction,
    ActivationResult,
    EmailSender,
    RegistrationResult,
    RegistrationStatus,
)
from .registration import RegistrationService
from .tokens import generate_activation_token
from .validation import FIELD_ORDER, ValidationMessage, validate_registration

__all__ = [
    "FIELD_ORDER",
    "Account",
    "AccountError",
    "AccountRepository",
    "AccountTransaction",
    "ActivationResult",
    "EmailAlreadyInUse",
    "EmailDeliveryFailed",
    "EmailSender",
    "RegistrationResult",
    "RegistrationService",
    "RegistrationStatus",
    "RollbackFailed",
    "ValidationMessage",
    "generate_activation_token",
    "validate_registration",
]
