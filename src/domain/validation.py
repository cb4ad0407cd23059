"""
Credential validation for registration payloads.

Each field check is a pure function returning its first failing message
(or None). validate_registration() runs them in FIELD_ORDER and merges
the results into one ordered mapping, which is what the API returns as
validationErrors.
"""

import string
from collections.abc import Callable
from enum import Enum

from email_validator import EmailNotValidError, validate_email

# Response bodies expose errors in exactly this order.
FIELD_ORDER: tuple[str, ...] = ("username", "email", "password")

USERNAME_MIN_LENGTH = 4
USERNAME_MAX_LENGTH = 32
PASSWORD_MIN_LENGTH = 6


class ValidationMessage(str, Enum):
    """Message catalog returned to API clients."""

    USERNAME_REQUIRED = "Username cannot be null"
    USERNAME_SIZE = "Must have minimal of 4 characters and maximum of 32 characters"
    EMAIL_REQUIRED = "Email cannot be null"
    EMAIL_INVALID = "Email is not valid"
    EMAIL_IN_USE = "Email in use"
    PASSWORD_REQUIRED = "Password cannot be null"
    PASSWORD_SIZE = "Password must be at least 6 characters"
    PASSWORD_PATTERN = "Password must have at least 1 uppercase, 1 lowercase and 1 number"


def check_username(username: str | None) -> ValidationMessage | None:
    if not username:
        return ValidationMessage.USERNAME_REQUIRED
    if not USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH:
        return ValidationMessage.USERNAME_SIZE
    return None


def is_valid_email(email: str) -> bool:
    """
    Check local-part@domain.tld syntax.

    Syntax is delegated to email-validator (no DNS lookups, special-use
    domains such as .test allowed); on top of that the domain needs a dot and
    an alphabetic top-level domain, which rejects "user@mail" and "user@mail.c3fdhd".
    """
    try:
        result = validate_email(
            email, check_deliverability=False, globally_deliverable=False
        )
    except EmailNotValidError:
        return False
    domain, _, tld = result.ascii_domain.rpartition(".")
    return bool(domain) and len(tld) >= 2 and tld.isalpha()


def check_email(
    email: str | None, email_in_use: Callable[[str], bool]
) -> ValidationMessage | None:
    """
    Check presence, syntax and uniqueness, in that order.

    email_in_use is only consulted for well-formed addresses and compares
    the address exactly as submitted.
    """
    if not email:
        return ValidationMessage.EMAIL_REQUIRED
    if not is_valid_email(email):
        return ValidationMessage.EMAIL_INVALID
    if email_in_use(email):
        return ValidationMessage.EMAIL_IN_USE
    return None


def check_password(password: str | None) -> ValidationMessage | None:
    if not password:
        return ValidationMessage.PASSWORD_REQUIRED
    if len(password) < PASSWORD_MIN_LENGTH:
        return ValidationMessage.PASSWORD_SIZE
    has_lower = any(c in string.ascii_lowercase for c in password)
    has_upper = any(c in string.ascii_uppercase for c in password)
    has_digit = any(c in string.digits for c in password)
    if not (has_lower and has_upper and has_digit):
        return ValidationMessage.PASSWORD_PATTERN
    return None


def validate_registration(
    username: str | None,
    email: str | None,
    password: str | None,
    email_in_use: Callable[[str], bool],
) -> dict[str, str]:
    """
    Validate a registration payload.

    Args:
        username: Submitted username (may be None or empty)
        email: Submitted email (may be None or empty)
        password: Submitted password (may be None or empty)
        email_in_use: Uniqueness lookup against the account store

    Returns:
        Mapping of field -> message in FIELD_ORDER, one entry per invalid
        field. Empty when the payload is valid.
    """
    values = {"username": username, "email": email, "password": password}
    checks: dict[str, Callable[[str | None], ValidationMessage | None]] = {
        "username": check_username,
        "email": lambda value: check_email(value, email_in_use),
        "password": check_password,
    }

    errors: dict[str, str] = {}
    for name in FIELD_ORDER:
        message = checks[name](values[name])
        if message is not None:
            errors[name] = message.value
    return errors
