"""Unit tests for the authentication dependency."""

from datetime import timedelta

import pytest
from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from uptask.core.config import get_settings
from uptask.infrastructure.api.dependencies import (
    get_confirmation_service,
    get_current_user,
    get_password_reset_service,
)
from uptask.infrastructure.auth import JWTService, get_jwt_service


@pytest.mark.asyncio
async def test_get_current_user_resolves_user(db_session: AsyncSession, create_user):
    user = await create_user(email="juan@example.com", name="Juan")
    token = get_jwt_service().create_access_token(user.id)

    current = await get_current_user(authorization=f"Bearer {token}", session=db_session)

    assert current.id == user.id
    assert current.name == "Juan"
    assert current.email == "juan@example.com"


@pytest.mark.asyncio
async def test_missing_header(db_session: AsyncSession):
    with pytest.raises(HTTPException) as exc_info:
        await get_current_user(authorization=None, session=db_session)

    assert exc_info.value.status_code == 401
    assert exc_info.value.detail == "No autorizado"
    assert exc_info.value.headers == {"WWW-Authenticate": "Bearer"}


@pytest.mark.asyncio
@pytest.mark.parametrize("header", ["Token abc", "Bearer", "Bearer a b"])
async def test_malformed_header(db_session: AsyncSession, header: str):
    with pytest.raises(HTTPException) as exc_info:
        await get_current_user(authorization=header, session=db_session)

    assert exc_info.value.status_code == 401
    assert exc_info.value.detail == "No autorizado"


@pytest.mark.asyncio
async def test_invalid_token(db_session: AsyncSession):
    with pytest.raises(HTTPException) as exc_info:
        await get_current_user(authorization="Bearer not-a-jwt", session=db_session)

    assert exc_info.value.status_code == 401
    assert exc_info.value.detail == "Token no válido"


@pytest.mark.asyncio
async def test_token_signed_with_other_secret(db_session: AsyncSession, create_user):
    user = await create_user()
    token = JWTService(secret_key="otro-secreto").create_access_token(user.id)

    with pytest.raises(HTTPException) as exc_info:
        await get_current_user(authorization=f"Bearer {token}", session=db_session)

    assert exc_info.value.detail == "Token no válido"


@pytest.mark.asyncio
async def test_expired_token(db_session: AsyncSession, create_user):
    user = await create_user()
    token = get_jwt_service().create_access_token(user.id, expires_delta=timedelta(seconds=-1))

    with pytest.raises(HTTPException) as exc_info:
        await get_current_user(authorization=f"Bearer {token}", session=db_session)

    assert exc_info.value.detail == "Token no válido"


@pytest.mark.asyncio
async def test_token_for_deleted_user(db_session: AsyncSession):
    token = get_jwt_service().create_access_token("00000000-0000-0000-0000-000000000000")

    with pytest.raises(HTTPException) as exc_info:
        await get_current_user(authorization=f"Bearer {token}", session=db_session)

    assert exc_info.value.status_code == 401
    assert exc_info.value.detail == "Token no válido"


@pytest.mark.asyncio
async def test_services_accept_any_code_age_by_default(db_session: AsyncSession):
    assert get_confirmation_service(db_session).expire_minutes is None
    assert get_password_reset_service(db_session).expire_minutes is None


@pytest.mark.asyncio
async def test_services_enforce_expiry_when_configured(db_session: AsyncSession, monkeypatch):
    settings = get_settings()
    monkeypatch.setattr(settings, "enforce_token_expiry", True)

    assert get_confirmation_service(db_session).expire_minutes == settings.token_expire_minutes
    assert get_password_reset_service(db_session).expire_minutes == settings.token_expire_minutes
