"""FastAPI dependencies for authentication and service wiring.

``get_current_user`` guards protected routes: it reads the Bearer session
token, verifies it and resolves the user it names.
"""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from uptask.core.config import get_settings
from uptask.core.logging import get_logger
from uptask.domain.services import ConfirmationService, PasswordResetService
from uptask.infrastructure.auth import JWTError, get_jwt_service
from uptask.infrastructure.persistence.database import get_db_session
from uptask.infrastructure.persistence.repositories import TokenRepository, UserRepository
from uptask.infrastructure.services.auth_email import AuthEmail

logger = get_logger(__name__)

NOT_AUTHORIZED = "No autorizado"
INVALID_SESSION = "Token no válido"


@dataclass
class CurrentUser:
    """The authenticated user, resolved from a valid session token."""

    id: str
    name: str
    email: str


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    authorization: Annotated[str | None, Header()] = None,
    session: Annotated[AsyncSession, Depends(get_db_session)] = None,
) -> CurrentUser:
    """Extract and validate the current user from the Authorization header.

    Raises:
        HTTPException: 401 if the header is missing, the token is invalid
            or expired, or the user no longer exists.
    """
    if authorization is None:
        logger.info("Authentication failed: missing Authorization header")
        raise _unauthorized(NOT_AUTHORIZED)

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        logger.info("Authentication failed: invalid Authorization header format")
        raise _unauthorized(NOT_AUTHORIZED)

    try:
        user_id = get_jwt_service().get_user_id(parts[1])
    except JWTError as e:
        logger.info("Authentication failed: invalid token", error=str(e))
        raise _unauthorized(INVALID_SESSION)

    user = await UserRepository(session).get_by_id(user_id)
    if user is None:
        logger.info("Authentication failed: user not found", user_id=user_id)
        raise _unauthorized(INVALID_SESSION)

    return CurrentUser(id=user.id, name=user.name, email=user.email)


# Type alias for dependency injection
AuthenticatedUser = Annotated[CurrentUser, Depends(get_current_user)]


_auth_email: AuthEmail | None = None


def get_auth_email() -> AuthEmail:
    """Get the process-wide mail dispatcher built from settings."""
    global _auth_email
    if _auth_email is None:
        _auth_email = AuthEmail.from_settings(get_settings())
    return _auth_email


def _token_expiry_minutes() -> int | None:
    settings = get_settings()
    return settings.token_expire_minutes if settings.enforce_token_expiry else None


def get_confirmation_service(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> ConfirmationService:
    """Get the account confirmation service for the request session."""
    return ConfirmationService(
        session=session,
        user_repo=UserRepository(session),
        token_repo=TokenRepository(session),
        expire_minutes=_token_expiry_minutes(),
    )


def get_password_reset_service(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> PasswordResetService:
    """Get the password reset service for the request session."""
    return PasswordResetService(
        session=session,
        user_repo=UserRepository(session),
        token_repo=TokenRepository(session),
        expire_minutes=_token_expiry_minutes(),
    )


AuthEmailDep = Annotated[AuthEmail, Depends(get_auth_email)]
ConfirmationServiceDep = Annotated[ConfirmationService, Depends(get_confirmation_service)]
PasswordResetServiceDep = Annotated[PasswordResetService, Depends(get_password_reset_service)]
