"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
"""

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    """
    Request model for user registration.

    Fields are optional so that missing or null values reach the credential
    validator and come back as validationErrors. Unknown fields such as
    `inactive` are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    username: str | None = None
    email: str | None = None
    password: str | None = None


class MessageResponse(BaseModel):
    """Response model carrying a single human-readable message."""

    message: str


class ValidationErrorResponse(BaseModel):
    """Response model for rejected registrations (field -> message)."""

    model_config = ConfigDict(populate_by_name=True)

    validation_errors: dict[str, str] = Field(..., alias="validationErrors")
