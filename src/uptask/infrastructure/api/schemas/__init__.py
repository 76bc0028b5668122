"""API Schemas for request/response validation."""

from uptask.infrastructure.api.schemas.auth_schemas import (
    CheckPasswordRequest,
    CreateAccountRequest,
    EmailRequest,
    ErrorResponse,
    LoginRequest,
    NewPasswordRequest,
    TokenRequest,
    UpdateCurrentPasswordRequest,
    UpdateProfileRequest,
    UserResponse,
)

__all__ = [
    "CheckPasswordRequest",
    "CreateAccountRequest",
    "EmailRequest",
    "ErrorResponse",
    "LoginRequest",
    "NewPasswordRequest",
    "TokenRequest",
    "UpdateCurrentPasswordRequest",
    "UpdateProfileRequest",
    "UserResponse",
]
