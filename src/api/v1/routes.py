"""
API v1 routes.

Defines REST endpoints for account registration and activation.
Mounted under the /api/1.0 prefix. Handlers are plain functions, which
FastAPI runs in its threadpool off the event loop.
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from src.api.dependencies import get_registration_service
from src.api.models import MessageResponse, RegisterRequest, ValidationErrorResponse
from src.domain.ports import ActivationResult, RegistrationStatus
from src.domain.registration import RegistrationService

router = APIRouter(tags=["users"])

USER_CREATED = "user created"
EMAIL_FAILURE = "Email failure"
ACCOUNT_ACTIVATED = "Account is activated"
INVALID_TOKEN = "Invalid Token"


@router.post(
    "/users",
    response_model=MessageResponse,
    responses={
        400: {"model": ValidationErrorResponse, "description": "Validation error"},
        502: {"model": MessageResponse, "description": "Activation email could not be sent"},
    },
    summary="Register a new user",
    description="Submit username, email and password. The account is stored inactive "
    "and an activation token is emailed; if the email cannot be sent nothing is stored.",
)
def register(
    request_data: RegisterRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> MessageResponse | JSONResponse:
    """
    Register a new user and send the activation email.

    - **username**: 4 to 32 characters
    - **email**: Valid, unused email address
    - **password**: At least 6 characters with upper case, lower case and a digit
    """
    result = service.register(request_data.username, request_data.email, request_data.password)

    if result.status is RegistrationStatus.VALIDATION_FAILED:
        body = ValidationErrorResponse(validation_errors=result.validation_errors)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=body.model_dump(by_alias=True),
        )

    if result.status is RegistrationStatus.NOTIFICATION_FAILED:
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content=MessageResponse(message=EMAIL_FAILURE).model_dump(),
        )

    return MessageResponse(message=USER_CREATED)


@router.post(
    "/users/token/{token}",
    response_model=MessageResponse,
    responses={
        400: {"model": MessageResponse, "description": "Unknown or already used token"},
    },
    summary="Activate an account",
    description="Consume the activation token received by email. Tokens are single-use.",
)
def activate(
    token: str,
    service: RegistrationService = Depends(get_registration_service),
) -> MessageResponse | JSONResponse:
    """Activate the pending account holding this token."""
    result = service.activate(token)

    if result is ActivationResult.ACTIVATED:
        return MessageResponse(message=ACCOUNT_ACTIVATED)

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=MessageResponse(message=INVALID_TOKEN).model_dump(),
    )
