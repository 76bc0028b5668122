"""Integration tests for the forgot password flow."""

from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from uptask.infrastructure.auth import verify_password
from uptask.infrastructure.persistence.models import TokenModel

API = "/api/auth"

NEW_PASSWORD = {"password": "nuevaPassword1", "password_confirmation": "nuevaPassword1"}


@pytest.mark.asyncio
async def test_forgot_password_sends_code(
    client: AsyncClient, db_session: AsyncSession, create_user, mock_auth_email: AsyncMock, sent_code
):
    user = await create_user(email="juan@example.com")

    response = await client.post(f"{API}/forgot-password", json={"email": "juan@example.com"})

    assert response.status_code == 200
    assert response.text == "Revisa tu email para instrucciones"

    tokens = (
        await db_session.execute(select(TokenModel).where(TokenModel.user_id == user.id))
    ).scalars().all()
    assert len(tokens) == 1
    mock_auth_email.send_password_reset_token.assert_awaited_once()
    kwargs = mock_auth_email.send_password_reset_token.call_args.kwargs
    assert kwargs["email"] == "juan@example.com"
    assert kwargs["name"] == "Juan"
    assert sent_code(mock_auth_email.send_password_reset_token) == tokens[0].token


@pytest.mark.asyncio
async def test_forgot_password_unknown_user(client: AsyncClient, mock_auth_email: AsyncMock):
    response = await client.post(f"{API}/forgot-password", json={"email": "nadie@example.com"})

    assert response.status_code == 404
    assert response.json() == {"error": "El usuario no está registrado"}
    mock_auth_email.send_password_reset_token.assert_not_awaited()


@pytest.mark.asyncio
async def test_forgot_password_allowed_for_unconfirmed_user(
    client: AsyncClient, create_user, mock_auth_email: AsyncMock
):
    await create_user(email="juan@example.com", confirmed=False)

    response = await client.post(f"{API}/forgot-password", json={"email": "juan@example.com"})

    assert response.status_code == 200
    mock_auth_email.send_password_reset_token.assert_awaited_once()


@pytest.mark.asyncio
async def test_validate_token_does_not_consume_code(
    client: AsyncClient, db_session: AsyncSession, create_user, mock_auth_email: AsyncMock, sent_code
):
    await create_user(email="juan@example.com")
    await client.post(f"{API}/forgot-password", json={"email": "juan@example.com"})
    code = sent_code(mock_auth_email.send_password_reset_token)

    first = await client.post(f"{API}/validate-token", json={"token": code})
    second = await client.post(f"{API}/validate-token", json={"token": code})

    assert first.status_code == 200
    assert first.text == "Token válido, define tu nueva contraseña"
    assert second.status_code == 200

    remaining = (await db_session.execute(select(TokenModel))).scalars().all()
    assert len(remaining) == 1


@pytest.mark.asyncio
async def test_validate_token_unknown_code(client: AsyncClient):
    response = await client.post(f"{API}/validate-token", json={"token": "000000"})

    assert response.status_code == 404
    assert response.json() == {"error": "Token no válido"}


@pytest.mark.asyncio
async def test_update_password_with_token(
    client: AsyncClient, db_session: AsyncSession, create_user, mock_auth_email: AsyncMock, sent_code
):
    user = await create_user(email="juan@example.com", password="password123")
    await client.post(f"{API}/forgot-password", json={"email": "juan@example.com"})
    code = sent_code(mock_auth_email.send_password_reset_token)

    response = await client.post(f"{API}/update-password/{code}", json=NEW_PASSWORD)

    assert response.status_code == 200
    assert response.text == "La contraseña se modificó correctamente"

    await db_session.refresh(user)
    assert verify_password("nuevaPassword1", user.password_hash)
    assert not verify_password("password123", user.password_hash)

    remaining = (await db_session.execute(select(TokenModel))).scalars().all()
    assert remaining == []

    login = await client.post(
        f"{API}/login", json={"email": "juan@example.com", "password": "nuevaPassword1"}
    )
    assert login.status_code == 200


@pytest.mark.asyncio
async def test_update_password_with_used_code(
    client: AsyncClient, create_user, mock_auth_email: AsyncMock, sent_code
):
    await create_user(email="juan@example.com")
    await client.post(f"{API}/forgot-password", json={"email": "juan@example.com"})
    code = sent_code(mock_auth_email.send_password_reset_token)

    await client.post(f"{API}/update-password/{code}", json=NEW_PASSWORD)
    response = await client.post(f"{API}/update-password/{code}", json=NEW_PASSWORD)

    assert response.status_code == 404
    assert response.json() == {"error": "Token no válido"}


@pytest.mark.asyncio
async def test_update_password_with_token_mismatch(client: AsyncClient):
    response = await client.post(
        f"{API}/update-password/123456",
        json={"password": "nuevaPassword1", "password_confirmation": "otraPassword1"},
    )

    assert response.status_code == 422
