"""Pydantic schemas for authentication endpoints."""

from typing import Annotated

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, Field, model_validator

PASSWORD_MIN_LENGTH = 8


def _check_email(value: str) -> str:
    """Validate the address format and return it exactly as typed.

    Stored emails are compared case-sensitively, so the normalized form
    produced by the validator is discarded.
    """
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValueError(f"E-mail no válido: {e}") from e
    return value


EmailAddress = Annotated[str, AfterValidator(_check_email)]


class PasswordConfirmationMixin(BaseModel):
    """A new password typed twice."""

    password: str = Field(
        ...,
        min_length=PASSWORD_MIN_LENGTH,
        description="New password (at least 8 characters)",
    )
    password_confirmation: str = Field(..., description="Must equal password")

    @model_validator(mode="after")
    def passwords_match(self) -> "PasswordConfirmationMixin":
        if self.password != self.password_confirmation:
            raise ValueError("Las contraseñas no son iguales")
        return self


class CreateAccountRequest(PasswordConfirmationMixin):
    """Request body for account creation."""

    name: str = Field(..., min_length=1, max_length=255, description="User's name")
    email: EmailAddress = Field(..., description="User's email address")


class LoginRequest(BaseModel):
    """Request body for login."""

    email: EmailAddress = Field(..., description="User's email address")
    password: str = Field(..., min_length=1, description="User's password")


class EmailRequest(BaseModel):
    """Request body for flows that only need an email address."""

    email: EmailAddress = Field(..., description="User's email address")


class TokenRequest(BaseModel):
    """Request body carrying a confirmation or reset code."""

    token: str = Field(..., min_length=1, description="Code received by email")


class NewPasswordRequest(PasswordConfirmationMixin):
    """Request body for resetting a password with a code."""


class UpdateProfileRequest(BaseModel):
    """Request body for profile updates."""

    name: str = Field(..., min_length=1, max_length=255, description="New name")
    email: EmailAddress = Field(..., description="New email address")


class UpdateCurrentPasswordRequest(PasswordConfirmationMixin):
    """Request body for changing the password of the current user."""

    current_password: str = Field(..., min_length=1, description="Current password")


class CheckPasswordRequest(BaseModel):
    """Request body for verifying the current user's password."""

    password: str = Field(..., min_length=1, description="Password to verify")


class UserResponse(BaseModel):
    """Public view of the authenticated user."""

    id: str = Field(..., description="User ID")
    name: str = Field(..., description="User's name")
    email: str = Field(..., description="User's email address")

    model_config = {"from_attributes": True}


class ErrorResponse(BaseModel):
    """Body of every error response."""

    error: str = Field(..., description="Human-readable error message")
