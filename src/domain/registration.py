"""
Registration domain service - Double-opt-in account workflow.

This module contains the core business logic for account registration
and activation.

Account lifecycle (forward-only)
================================

States:
- PENDING: inactive=True, activation token set (after committed registration)
- ACTIVE:  inactive=False, token cleared (after activation, terminal)

Registration is one store transaction:
    validate -> hash -> insert pending row -> send activation email
    -> commit (email sent) | rollback (email failed)

So an account row only ever becomes visible together with a delivered
activation email. Activation erases the token, which makes it single-use.
"""

import logging
from dataclasses import dataclass

import bcrypt

from .exceptions import EmailAlreadyInUse, EmailDeliveryFailed
from .ports import (
    AccountRepository,
    ActivationResult,
    EmailSender,
    RegistrationResult,
)
from .tokens import DEFAULT_TOKEN_LENGTH, generate_activation_token
from .validation import ValidationMessage, validate_registration

logger = logging.getLogger(__name__)

# bcrypt only consumes the first 72 bytes of the secret
_BCRYPT_MAX_BYTES = 72


@dataclass
class RegistrationService:
    """
    Domain service for account registration and activation.

    Orchestrates the registration flow: validation, password hashing,
    token generation, transactional persistence and email notification.
    """

    repository: AccountRepository
    email_sender: EmailSender
    bcrypt_cost: int = 10
    token_length: int = DEFAULT_TOKEN_LENGTH

    def register(
        self, username: str | None, email: str | None, password: str | None
    ) -> RegistrationResult:
        """
        Register a new pending account and send its activation email.

        Args:
            username: Submitted username
            email: Submitted email (stored exactly as submitted)
            password: Submitted password (will be hashed)

        Returns:
            RegistrationResult.created() when the account was committed,
            RegistrationResult.invalid(errors) for rejected input (including
            a duplicate email detected by the store), or
            RegistrationResult.notification_failed() when the email could not
            be sent and the account was rolled back.

        Raises:
            RollbackFailed: If the pending account could not be rolled back
        """
        errors = validate_registration(
            username, email, password, email_in_use=self.repository.email_in_use
        )
        if errors:
            return RegistrationResult.invalid(errors)

        # Validation guarantees all three are non-empty strings from here on
        password_hash = self._hash_password(password)
        token = generate_activation_token(self.token_length)

        with self.repository.begin() as transaction:
            try:
                account_id = transaction.insert_pending_account(
                    username, email, password_hash, token
                )
            except EmailAlreadyInUse:
                transaction.rollback()
                logger.info("Registration lost email race, reporting email in use")
                return RegistrationResult.invalid(
                    {"email": ValidationMessage.EMAIL_IN_USE.value}
                )

            try:
                self.email_sender.send_account_activation(email, token)
            except EmailDeliveryFailed:
                transaction.rollback()
                logger.warning(
                    "Activation email delivery failed, account %s rolled back", account_id
                )
                return RegistrationResult.notification_failed()

            try:
                transaction.commit()
            except EmailAlreadyInUse:
                logger.info("Registration lost email race at commit, reporting email in use")
                return RegistrationResult.invalid(
                    {"email": ValidationMessage.EMAIL_IN_USE.value}
                )

        logger.info("Account %s registered, awaiting activation", account_id)
        return RegistrationResult.created()

    def activate(self, token: str) -> ActivationResult:
        """
        Activate the pending account holding this token.

        The repository flips inactive and clears the token in one atomic
        update, so a token that was already used no longer matches anything.

        Args:
            token: Activation token from the email

        Returns:
            ActivationResult.ACTIVATED or ActivationResult.INVALID_TOKEN
        """
        if not token or not self.repository.activate(token):
            logger.info("Activation rejected: unknown or used token")
            return ActivationResult.INVALID_TOKEN

        logger.info("Account activated")
        return ActivationResult.ACTIVATED

    def _hash_password(self, password: str) -> str:
        """Hash password using bcrypt with the configured cost factor."""
        secret = password.encode()[:_BCRYPT_MAX_BYTES]
        return bcrypt.hashpw(secret, bcrypt.gensalt(rounds=self.bcrypt_cost)).decode()
