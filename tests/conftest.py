"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- In-memory account store
- Recording email sender
- Application wired to both, with a test client
"""

from collections.abc import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.adapters.repository.memory import InMemoryAccountRepository
from src.api.dependencies import get_email_sender
from src.api.main import app as main_app
from src.domain.exceptions import EmailDeliveryFailed

VALID_USER = {
    "username": "user1",
    "email": "user1@mail.com",
    "password": "P4ssword",
}


class RecordingEmailSender:
    """EmailSender test double that records deliveries and can be made to fail."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str]] = []
        self.fail = False

    def send_account_activation(self, email: str, token: str) -> None:
        if self.fail:
            raise EmailDeliveryFailed(email)
        self.sent.append((email, token))


@pytest.fixture
def valid_user() -> dict[str, str]:
    """Fresh copy of a payload that passes validation."""
    return dict(VALID_USER)


@pytest.fixture
def repository() -> InMemoryAccountRepository:
    return InMemoryAccountRepository()


@pytest.fixture
def email_sender() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture
def app(
    repository: InMemoryAccountRepository, email_sender: RecordingEmailSender
) -> Generator[FastAPI, None, None]:
    """Main application backed by the in-memory store and recording sender."""
    main_app.state.repository = repository
    main_app.dependency_overrides[get_email_sender] = lambda: email_sender
    yield main_app
    main_app.dependency_overrides.clear()


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create test client (lifespan is not run, state is injected above)."""
    return TestClient(app)
