"""Authentication API routes.

Provides endpoints for account creation and confirmation, login, password
reset and the authenticated profile. Successful calls answer a plain-text
message; failures answer ``{"error": "<mensaje>"}``.
"""

from fastapi import APIRouter, BackgroundTasks, Depends, status
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession

from uptask.core.logging import get_logger
from uptask.infrastructure.api.dependencies import (
    AuthEmailDep,
    AuthenticatedUser,
    ConfirmationServiceDep,
    PasswordResetServiceDep,
)
from uptask.infrastructure.api.schemas import (
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
from uptask.infrastructure.auth import (
    get_jwt_service,
    hash_password,
    needs_rehash,
    verify_password,
)
from uptask.infrastructure.persistence.database import get_db_session
from uptask.infrastructure.persistence.models import UserModel
from uptask.infrastructure.persistence.repositories import UserRepository

logger = get_logger(__name__)

router = APIRouter()

GENERIC_ERROR = "Hubo un error"
INVALID_TOKEN = "Token no válido"

_error_responses = {
    500: {"model": ErrorResponse, "description": "Unexpected error"},
}


def error_response(status_code: int, message: str) -> JSONResponse:
    """Build the JSON body used by every failure."""
    return JSONResponse(status_code=status_code, content={"error": message})


async def unexpected_error(session: AsyncSession, operation: str, exc: Exception) -> JSONResponse:
    """Log an unexpected failure, discard pending changes and answer 500."""
    logger.error(
        "Unexpected error",
        operation=operation,
        error=str(exc),
        exc_type=type(exc).__name__,
    )
    await session.rollback()
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR)


@router.post(
    "/create-account",
    response_class=PlainTextResponse,
    responses={409: {"model": ErrorResponse, "description": "Email already registered"}, **_error_responses},
)
async def create_account(
    request: CreateAccountRequest,
    background_tasks: BackgroundTasks,
    confirmation_service: ConfirmationServiceDep,
    auth_email: AuthEmailDep,
    session: AsyncSession = Depends(get_db_session),
) -> Response:
    """Create an unconfirmed account and email it a confirmation code.

    The user and its first code are committed together.
    """
    try:
        user_repo = UserRepository(session)
        if await user_repo.email_exists(request.email):
            logger.info("Account creation failed: email exists", email=request.email)
            return error_response(status.HTTP_409_CONFLICT, "El usuario ya está registrado")

        user = UserModel(
            name=request.name,
            email=request.email,
            password_hash=hash_password(request.password),
        )
        await user_repo.create(user)
        token = await confirmation_service.issue_token(user)

        background_tasks.add_task(
            auth_email.send_confirmation_email,
            email=user.email,
            name=user.name,
            token=token.token,
        )

        logger.info("Account created", user_id=user.id, email=user.email)
        return PlainTextResponse("Cuenta creada, revisa tu email para confirmarla")
    except Exception as e:
        return await unexpected_error(session, "create_account", e)


@router.post(
    "/confirm-account",
    response_class=PlainTextResponse,
    responses={404: {"model": ErrorResponse, "description": "Invalid token"}, **_error_responses},
)
async def confirm_account(
    request: TokenRequest,
    confirmation_service: ConfirmationServiceDep,
    session: AsyncSession = Depends(get_db_session),
) -> Response:
    """Confirm an account with the code received by email."""
    try:
        user = await confirmation_service.confirm(request.token)
        if user is None:
            return error_response(status.HTTP_404_NOT_FOUND, INVALID_TOKEN)
        return PlainTextResponse("Cuenta confirmada correctamente")
    except Exception as e:
        return await unexpected_error(session, "confirm_account", e)


@router.post(
    "/login",
    response_class=PlainTextResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Unconfirmed account or wrong password"},
        404: {"model": ErrorResponse, "description": "User not found"},
        **_error_responses,
    },
)
async def login(
    request: LoginRequest,
    background_tasks: BackgroundTasks,
    confirmation_service: ConfirmationServiceDep,
    auth_email: AuthEmailDep,
    session: AsyncSession = Depends(get_db_session),
) -> Response:
    """Authenticate a user and return a session token as plain text.

    Flow:
    1. Look up the user by email
    2. If unconfirmed, issue a new confirmation code, email it and reject
    3. Verify the password, upgrading an outdated hash
    4. Issue the session token
    """
    try:
        user_repo = UserRepository(session)
        user = await user_repo.get_by_email(request.email)
        if user is None:
            logger.info("Login failed: user not found", email=request.email)
            return error_response(status.HTTP_404_NOT_FOUND, "Usuario no encontrado")

        if not user.confirmed:
            token = await confirmation_service.issue_token(user)
            background_tasks.add_task(
                auth_email.send_confirmation_email,
                email=user.email,
                name=user.name,
                token=token.token,
            )
            logger.info("Login failed: account not confirmed", user_id=user.id)
            return error_response(
                status.HTTP_401_UNAUTHORIZED,
                "La cuenta no ha sido confirmada, hemos enviado un e-mail de confirmación",
            )

        if not verify_password(request.password, user.password_hash):
            logger.info("Login failed: invalid password", user_id=user.id)
            return error_response(status.HTTP_401_UNAUTHORIZED, "La contraseña es incorrecta")

        if needs_rehash(user.password_hash):
            user.password_hash = hash_password(request.password)
            await user_repo.update(user)
            await session.commit()
            logger.info("Password hash upgraded", user_id=user.id)

        access_token = get_jwt_service().create_access_token(user_id=user.id)
        logger.info("User logged in successfully", user_id=user.id, email=user.email)
        return PlainTextResponse(access_token)
    except Exception as e:
        return await unexpected_error(session, "login", e)


@router.post(
    "/request-code",
    response_class=PlainTextResponse,
    responses={
        403: {"model": ErrorResponse, "description": "Account already confirmed"},
        404: {"model": ErrorResponse, "description": "User not found"},
        **_error_responses,
    },
)
async def request_confirmation_code(
    request: EmailRequest,
    background_tasks: BackgroundTasks,
    confirmation_service: ConfirmationServiceDep,
    auth_email: AuthEmailDep,
    session: AsyncSession = Depends(get_db_session),
) -> Response:
    """Send a fresh confirmation code to an unconfirmed account."""
    try:
        user = await UserRepository(session).get_by_email(request.email)
        if user is None:
            return error_response(status.HTTP_404_NOT_FOUND, "El usuario no está registrado")

        if user.confirmed:
            return error_response(status.HTTP_403_FORBIDDEN, "El usuario ya ha sido confirmado")

        token = await confirmation_service.issue_token(user)
        background_tasks.add_task(
            auth_email.send_confirmation_email,
            email=user.email,
            name=user.name,
            token=token.token,
        )
        return PlainTextResponse("Se envió un nuevo token a tu email para confirmar la cuenta")
    except Exception as e:
        return await unexpected_error(session, "request_confirmation_code", e)


@router.post(
    "/forgot-password",
    response_class=PlainTextResponse,
    responses={404: {"model": ErrorResponse, "description": "User not found"}, **_error_responses},
)
async def forgot_password(
    request: EmailRequest,
    background_tasks: BackgroundTasks,
    reset_service: PasswordResetServiceDep,
    auth_email: AuthEmailDep,
    session: AsyncSession = Depends(get_db_session),
) -> Response:
    """Email a password reset code."""
    try:
        user = await UserRepository(session).get_by_email(request.email)
        if user is None:
            return error_response(status.HTTP_404_NOT_FOUND, "El usuario no está registrado")

        token = await reset_service.issue_token(user)
        background_tasks.add_task(
            auth_email.send_password_reset_token,
            email=user.email,
            name=user.name,
            token=token.token,
        )
        return PlainTextResponse("Revisa tu email para instrucciones")
    except Exception as e:
        return await unexpected_error(session, "forgot_password", e)


@router.post(
    "/validate-token",
    response_class=PlainTextResponse,
    responses={404: {"model": ErrorResponse, "description": "Invalid token"}, **_error_responses},
)
async def validate_token(
    request: TokenRequest,
    reset_service: PasswordResetServiceDep,
    session: AsyncSession = Depends(get_db_session),
) -> Response:
    """Check a reset code before asking for the new password."""
    try:
        if not await reset_service.verify_reset_token(request.token):
            return error_response(status.HTTP_404_NOT_FOUND, INVALID_TOKEN)
        return PlainTextResponse("Token válido, define tu nueva contraseña")
    except Exception as e:
        return await unexpected_error(session, "validate_token", e)


@router.post(
    "/update-password/{token}",
    response_class=PlainTextResponse,
    responses={404: {"model": ErrorResponse, "description": "Invalid token"}, **_error_responses},
)
async def update_password_with_token(
    token: str,
    request: NewPasswordRequest,
    reset_service: PasswordResetServiceDep,
    session: AsyncSession = Depends(get_db_session),
) -> Response:
    """Set a new password using a reset code and consume the code."""
    try:
        user = await reset_service.reset_password(token, request.password)
        if user is None:
            return error_response(status.HTTP_404_NOT_FOUND, INVALID_TOKEN)
        return PlainTextResponse("La contraseña se modificó correctamente")
    except Exception as e:
        return await unexpected_error(session, "update_password_with_token", e)


@router.get(
    "/user",
    response_model=UserResponse,
    responses={401: {"model": ErrorResponse, "description": "Not authenticated"}},
)
async def get_user(current_user: AuthenticatedUser) -> UserResponse:
    """Return the authenticated user."""
    return UserResponse(id=current_user.id, name=current_user.name, email=current_user.email)


@router.put(
    "/profile",
    response_class=PlainTextResponse,
    responses={409: {"model": ErrorResponse, "description": "Email taken"}, **_error_responses},
)
async def update_profile(
    request: UpdateProfileRequest,
    current_user: AuthenticatedUser,
    session: AsyncSession = Depends(get_db_session),
) -> Response:
    """Update the name and email of the authenticated user."""
    try:
        user_repo = UserRepository(session)
        owner = await user_repo.get_by_email(request.email)
        if owner is not None and owner.id != current_user.id:
            logger.info("Profile update failed: email taken", user_id=current_user.id)
            return error_response(status.HTTP_409_CONFLICT, "Ese email ya está registrado")

        user = await user_repo.get_by_id(current_user.id)
        user.name = request.name
        user.email = request.email
        await user_repo.update(user)
        await session.commit()

        logger.info("Profile updated", user_id=user.id)
        return PlainTextResponse("Perfil actualizado correctamente")
    except Exception as e:
        return await unexpected_error(session, "update_profile", e)


@router.post(
    "/update-password",
    response_class=PlainTextResponse,
    responses={401: {"model": ErrorResponse, "description": "Wrong current password"}, **_error_responses},
)
async def update_current_user_password(
    request: UpdateCurrentPasswordRequest,
    current_user: AuthenticatedUser,
    session: AsyncSession = Depends(get_db_session),
) -> Response:
    """Change the password of the authenticated user."""
    try:
        user_repo = UserRepository(session)
        user = await user_repo.get_by_id(current_user.id)
        if not verify_password(request.current_password, user.password_hash):
            logger.info("Password change failed: wrong current password", user_id=user.id)
            return error_response(status.HTTP_401_UNAUTHORIZED, "El password actual es incorrecto")

        user.password_hash = hash_password(request.password)
        await user_repo.update(user)
        await session.commit()

        logger.info("Password changed", user_id=user.id)
        return PlainTextResponse("El password se modificó correctamente")
    except Exception as e:
        return await unexpected_error(session, "update_current_user_password", e)


@router.post(
    "/check-password",
    response_class=PlainTextResponse,
    responses={401: {"model": ErrorResponse, "description": "Wrong password"}, **_error_responses},
)
async def check_password(
    request: CheckPasswordRequest,
    current_user: AuthenticatedUser,
    session: AsyncSession = Depends(get_db_session),
) -> Response:
    """Verify the authenticated user's password without changing anything."""
    try:
        user = await UserRepository(session).get_by_id(current_user.id)
        if not verify_password(request.password, user.password_hash):
            return error_response(status.HTTP_401_UNAUTHORIZED, "El password es incorrecto")
        return PlainTextResponse("Password Correcto")
    except Exception as e:
        return await unexpected_error(session, "check_password", e)
