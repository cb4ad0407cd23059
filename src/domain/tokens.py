"""Activation token generation."""

import secrets

DEFAULT_TOKEN_LENGTH = 16


def generate_activation_token(length: int = DEFAULT_TOKEN_LENGTH) -> str:
    """
    Generate a cryptographically secure activation token.

    Uses the secrets module (CSPRNG) and renders lowercase hex.
    Returns exactly `length` characters.
    """
    if length < 1:
        raise ValueError("token length must be positive")
    return secrets.token_hex((length + 1) // 2)[:length]
