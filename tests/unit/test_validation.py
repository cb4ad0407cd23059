"""
Unit tests for credential validation.

Tests verify:
- Per-field rules and their exact messages
- First failing rule wins per field
- Field order username, email, password
- Uniqueness lookup only runs for well-formed emails
"""

from unittest.mock import Mock

import pytest

from src.domain.validation import (
    FIELD_ORDER,
    ValidationMessage,
    check_email,
    check_password,
    check_username,
    is_valid_email,
    validate_registration,
)


def never_in_use(email: str) -> bool:
    return False


class TestFieldOrder:
    """Tests for the explicit field order constant."""

    def test_field_order_is_username_email_password(self) -> None:
        assert FIELD_ORDER == ("username", "email", "password")

    def test_all_invalid_reported_in_field_order(self) -> None:
        """Every invalid field is reported, in FIELD_ORDER."""
        errors = validate_registration(None, None, None, never_in_use)
        assert list(errors) == ["username", "email", "password"]

    def test_username_and_email_order(self) -> None:
        errors = validate_registration(None, None, "P4ssword", never_in_use)
        assert list(errors) == ["username", "email"]

    def test_username_and_email_in_use_order(self) -> None:
        """Email in use is reported after an invalid username."""
        errors = validate_registration(None, "user1@mail.com", "P4ssword", lambda e: True)
        assert errors == {
            "username": "Username cannot be null",
            "email": "Email in use",
        }

    def test_valid_payload_returns_empty_mapping(self) -> None:
        assert validate_registration("user1", "user1@mail.com", "P4ssword", never_in_use) == {}


class TestMessages:
    """Tests for the message catalog."""

    @pytest.mark.parametrize(
        ("field", "value", "expected"),
        [
            ("username", None, "Username cannot be null"),
            ("username", "", "Username cannot be null"),
            ("username", "usr", "Must have minimal of 4 characters and maximum of 32 characters"),
            ("username", "a" * 33, "Must have minimal of 4 characters and maximum of 32 characters"),
            ("email", None, "Email cannot be null"),
            ("email", "", "Email cannot be null"),
            ("email", "mail.com", "Email is not valid"),
            ("email", "user.mail.com", "Email is not valid"),
            ("email", "user@mail.c3fdhd", "Email is not valid"),
            ("email", "user@mail", "Email is not valid"),
            ("password", None, "Password cannot be null"),
            ("password", "", "Password cannot be null"),
            ("password", "P4ssw", "Password must be at least 6 characters"),
            ("password", "alllowercase", "Password must have at least 1 uppercase, 1 lowercase and 1 number"),
            ("password", "ALLUPPERCASE", "Password must have at least 1 uppercase, 1 lowercase and 1 number"),
            ("password", "1234567", "Password must have at least 1 uppercase, 1 lowercase and 1 number"),
            ("password", "lowerANDUPPER", "Password must have at least 1 uppercase, 1 lowercase and 1 number"),
            ("password", "lowerand11222", "Password must have at least 1 uppercase, 1 lowercase and 1 number"),
            ("password", "UPPERAND21343", "Password must have at least 1 uppercase, 1 lowercase and 1 number"),
        ],
    )
    def test_field_message(self, field: str, value: str | None, expected: str) -> None:
        payload = {"username": "user1", "email": "user1@mail.com", "password": "P4ssword"}
        payload[field] = value

        errors = validate_registration(
            payload["username"], payload["email"], payload["password"], never_in_use
        )

        assert errors == {field: expected}

    def test_messages_are_str_enum(self) -> None:
        """Catalog values compare equal to the plain strings."""
        assert ValidationMessage.EMAIL_IN_USE == "Email in use"
        assert isinstance(ValidationMessage.EMAIL_IN_USE, str)

    def test_errors_contain_plain_strings(self) -> None:
        errors = validate_registration(None, None, None, never_in_use)
        assert all(type(message) is str for message in errors.values())


class TestUsername:
    """Tests for username rules."""

    @pytest.mark.parametrize("username", ["user", "a" * 32, "user1"])
    def test_boundaries_accepted(self, username: str) -> None:
        assert check_username(username) is None

    def test_required_before_length(self) -> None:
        assert check_username("") is ValidationMessage.USERNAME_REQUIRED


class TestEmail:
    """Tests for email rules."""

    @pytest.mark.parametrize(
        "email",
        [
            "user1@mail.com",
            "first.last@sub.domain.org",
            "a+tag@mail.io",
            "user1@shop.test",
            "user1@home.local",
        ],
    )
    def test_valid_emails(self, email: str) -> None:
        assert is_valid_email(email) is True

    @pytest.mark.parametrize("email", ["plainaddress", "@mail.com", "user@", "user@@mail.com"])
    def test_invalid_emails(self, email: str) -> None:
        assert is_valid_email(email) is False

    @pytest.mark.parametrize("email", ["user1@shop.test", "user1@home.local"])
    def test_special_use_domains_pass_registration(self, email: str) -> None:
        """Reserved test and local domains are syntactically valid addresses."""
        assert validate_registration("user1", email, "P4ssword", never_in_use) == {}

    def test_in_use_lookup_receives_exact_email(self) -> None:
        lookup = Mock(return_value=False)
        check_email("User1@Mail.com", lookup)
        lookup.assert_called_once_with("User1@Mail.com")

    def test_in_use_not_consulted_for_invalid_format(self) -> None:
        """Uniqueness check only runs after the format check passes."""
        lookup = Mock(return_value=True)
        assert check_email("user.mail.com", lookup) is ValidationMessage.EMAIL_INVALID
        lookup.assert_not_called()

    def test_in_use_not_consulted_for_missing_email(self) -> None:
        lookup = Mock(return_value=True)
        assert check_email(None, lookup) is ValidationMessage.EMAIL_REQUIRED
        lookup.assert_not_called()

    def test_in_use(self) -> None:
        assert check_email("user1@mail.com", lambda e: True) is ValidationMessage.EMAIL_IN_USE


class TestPassword:
    """Tests for password rules."""

    def test_exactly_six_characters_accepted(self) -> None:
        assert check_password("Pa55wd") is None

    def test_length_checked_before_pattern(self) -> None:
        assert check_password("abc") is ValidationMessage.PASSWORD_SIZE

    @pytest.mark.parametrize(
        "password",
        ["Password²", "Password٣", "PASSWORDß1", "ПАРОЛЬ1abc"],
    )
    def test_only_ascii_letters_and_digits_count(self, password: str) -> None:
        """Non-ASCII letters and digits do not satisfy the character classes."""
        assert check_password(password) is ValidationMessage.PASSWORD_PATTERN

    def test_mixed_with_non_ascii_still_accepted(self) -> None:
        assert check_password("Pässw0rd") is None
