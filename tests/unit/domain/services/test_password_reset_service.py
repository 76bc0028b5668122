"""Unit tests for PasswordResetService."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from uptask.domain.services import PasswordResetService
from uptask.infrastructure.auth import verify_password
from uptask.infrastructure.persistence.models import TokenModel
from uptask.infrastructure.persistence.repositories import TokenRepository, UserRepository


@pytest.fixture
def reset_service(db_session: AsyncSession) -> PasswordResetService:
    return PasswordResetService(
        session=db_session,
        user_repo=UserRepository(db_session),
        token_repo=TokenRepository(db_session),
    )


class TestVerifyResetToken:

    @pytest.mark.asyncio
    async def test_valid_code(self, reset_service, create_user):
        user = await create_user()
        token = await reset_service.issue_token(user)

        assert await reset_service.verify_reset_token(token.token) is True
        # Verification does not consume the code
        assert await reset_service.verify_reset_token(token.token) is True

    @pytest.mark.asyncio
    async def test_unknown_code(self, reset_service):
        assert await reset_service.verify_reset_token("000000") is False

    @pytest.mark.asyncio
    async def test_expired_code_when_enforced(self, db_session, reset_service, create_user):
        user = await create_user()
        db_session.add(
            TokenModel(
                token="654321",
                user_id=user.id,
                created_at=datetime.now(timezone.utc) - timedelta(hours=1),
            )
        )
        await db_session.commit()
        reset_service.expire_minutes = 10

        assert await reset_service.verify_reset_token("654321") is False


class TestResetPassword:

    @pytest.mark.asyncio
    async def test_reset_password_success(self, db_session, reset_service, create_user):
        user = await create_user(password="password123")
        token = await reset_service.issue_token(user)

        updated = await reset_service.reset_password(token.token, "nuevaPassword1")

        assert updated is not None
        assert verify_password("nuevaPassword1", updated.password_hash)
        assert await TokenRepository(db_session).get_by_token(token.token) is None

    @pytest.mark.asyncio
    async def test_reset_password_unknown_code(self, reset_service):
        assert await reset_service.reset_password("000000", "nuevaPassword1") is None

    @pytest.mark.asyncio
    async def test_reset_password_keeps_other_codes(self, db_session, reset_service, create_user):
        user = await create_user()
        first = await reset_service.issue_token(user)
        second = await reset_service.issue_token(user)

        await reset_service.reset_password(second.token, "nuevaPassword1")

        remaining = await TokenRepository(db_session).list_for_user(user.id)
        assert [t.id for t in remaining] == [first.id]
