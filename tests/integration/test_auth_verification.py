"""Integration tests for account confirmation."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from uptask.core.config import get_settings
from uptask.infrastructure.persistence.models import TokenModel, UserModel

API = "/api/auth"


@pytest.mark.asyncio
async def test_confirm_account_with_emailed_code(
    client: AsyncClient, db_session: AsyncSession, mock_auth_email: AsyncMock, sent_code
):
    await client.post(
        f"{API}/create-account",
        json={
            "name": "Ana",
            "email": "ana@example.com",
            "password": "password123",
            "password_confirmation": "password123",
        },
    )
    code = sent_code(mock_auth_email.send_confirmation_email)

    response = await client.post(f"{API}/confirm-account", json={"token": code})

    assert response.status_code == 200
    assert response.text == "Cuenta confirmada correctamente"

    user = (
        await db_session.execute(select(UserModel).where(UserModel.email == "ana@example.com"))
    ).scalar_one()
    await db_session.refresh(user)
    assert user.confirmed is True

    remaining = (await db_session.execute(select(TokenModel))).scalars().all()
    assert remaining == []


@pytest.mark.asyncio
async def test_confirm_account_code_is_single_use(
    client: AsyncClient, mock_auth_email: AsyncMock, create_user, sent_code
):
    await create_user(email="ana@example.com", confirmed=False)
    await client.post(f"{API}/request-code", json={"email": "ana@example.com"})
    code = sent_code(mock_auth_email.send_confirmation_email)

    first = await client.post(f"{API}/confirm-account", json={"token": code})
    second = await client.post(f"{API}/confirm-account", json={"token": code})

    assert first.status_code == 200
    assert second.status_code == 404
    assert second.json() == {"error": "Token no válido"}


@pytest.mark.asyncio
async def test_confirm_account_unknown_code(client: AsyncClient):
    response = await client.post(f"{API}/confirm-account", json={"token": "000000"})

    assert response.status_code == 404
    assert response.json() == {"error": "Token no válido"}


@pytest.mark.asyncio
async def test_confirm_account_missing_token(client: AsyncClient):
    response = await client.post(f"{API}/confirm-account", json={})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_old_code_accepted_when_expiry_not_enforced(
    client: AsyncClient, db_session: AsyncSession, create_user
):
    user = await create_user(email="ana@example.com", confirmed=False)
    db_session.add(
        TokenModel(
            token="123456",
            user_id=user.id,
            created_at=datetime.now(timezone.utc) - timedelta(days=2),
        )
    )
    await db_session.commit()

    response = await client.post(f"{API}/confirm-account", json={"token": "123456"})

    assert response.status_code == 200


@pytest.mark.asyncio
async def test_old_code_rejected_when_expiry_enforced(
    client: AsyncClient, db_session: AsyncSession, create_user, monkeypatch
):
    monkeypatch.setattr(get_settings(), "enforce_token_expiry", True)
    user = await create_user(email="ana@example.com", confirmed=False)
    db_session.add(
        TokenModel(
            token="123456",
            user_id=user.id,
            created_at=datetime.now(timezone.utc) - timedelta(minutes=30),
        )
    )
    await db_session.commit()

    response = await client.post(f"{API}/confirm-account", json={"token": "123456"})

    assert response.status_code == 404
    assert response.json() == {"error": "Token no válido"}
