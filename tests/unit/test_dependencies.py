"""
Unit tests for settings and dependency wiring.
"""

import pytest

from src.adapters.smtp.console import ConsoleEmailSender
from src.adapters.smtp.smtp import SmtpEmailSender
from src.api.dependencies import get_email_sender, get_registration_service
from src.config.settings import Settings


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("BCRYPT_COST", "ACTIVATION_TOKEN_LENGTH", "EMAIL_BACKEND", "REPOSITORY_BACKEND"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.bcrypt_cost == 10
        assert settings.activation_token_length == 16
        assert settings.email_backend == "console"
        assert settings.repository_backend == "postgres"

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EMAIL_BACKEND", "smtp")
        monkeypatch.setenv("SMTP_PORT", "2525")
        monkeypatch.setenv("repository_backend", "memory")

        settings = Settings(_env_file=None)

        assert settings.email_backend == "smtp"
        assert settings.smtp_port == 2525
        assert settings.repository_backend == "memory"


class TestEmailSenderSelection:
    """Tests for get_email_sender."""

    def test_console_by_default(self) -> None:
        sender = get_email_sender(Settings(_env_file=None, email_backend="console"))
        assert isinstance(sender, ConsoleEmailSender)

    def test_smtp_when_configured(self) -> None:
        sender = get_email_sender(
            Settings(_env_file=None, email_backend="smtp", smtp_host="smtp.mail.com")
        )
        assert isinstance(sender, SmtpEmailSender)


class TestRegistrationServiceWiring:
    """Tests for get_registration_service."""

    def test_service_uses_settings(self) -> None:
        repository = object()
        sender = ConsoleEmailSender()
        settings = Settings(_env_file=None, bcrypt_cost=12, activation_token_length=24)

        service = get_registration_service(repository, sender, settings)  # type: ignore[arg-type]

        assert service.repository is repository
        assert service.email_sender is sender
        assert service.bcrypt_cost == 12
        assert service.token_length == 24
