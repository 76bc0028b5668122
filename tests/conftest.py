"""Pytest configuration for all tests."""

from typing import AsyncGenerator, Awaitable, Callable
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from uptask.infrastructure.auth import get_jwt_service, hash_password
from uptask.infrastructure.persistence.database import Base
from uptask.infrastructure.persistence.models import UserModel
from uptask.infrastructure.services.auth_email import AuthEmail


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session.

    Uses an in-memory SQLite database for testing.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def mock_auth_email() -> AsyncMock:
    """Mail dispatcher that records sends instead of delivering them."""
    mail = AsyncMock(spec=AuthEmail)
    mail.send_confirmation_email.return_value = True
    mail.send_password_reset_token.return_value = True
    return mail


@pytest_asyncio.fixture
async def client(
    db_session: AsyncSession, mock_auth_email: AsyncMock
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with overridden database and mail dependencies."""
    from uptask.infrastructure.api.app import app
    from uptask.infrastructure.api.dependencies import get_auth_email
    from uptask.infrastructure.persistence.database import get_db_session

    async def override_get_db_session():
        yield db_session

    app.dependency_overrides[get_db_session] = override_get_db_session
    app.dependency_overrides[get_auth_email] = lambda: mock_auth_email

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides = {}


@pytest.fixture
def create_user(db_session: AsyncSession) -> Callable[..., Awaitable[UserModel]]:
    """Factory storing a user directly in the database."""

    async def _create(
        email: str = "juan@example.com",
        password: str = "password123",
        name: str = "Juan",
        confirmed: bool = True,
    ) -> UserModel:
        user = UserModel(
            name=name,
            email=email,
            password_hash=hash_password(password),
            confirmed=confirmed,
        )
        db_session.add(user)
        await db_session.commit()
        return user

    return _create


@pytest.fixture
def auth_header() -> Callable[[UserModel], dict[str, str]]:
    """Build an Authorization header carrying a fresh session token."""

    def _header(user: UserModel) -> dict[str, str]:
        return {"Authorization": f"Bearer {get_jwt_service().create_access_token(user.id)}"}

    return _header


@pytest.fixture
def sent_code() -> Callable[[AsyncMock], str]:
    """Read the code passed to the last call of a mail dispatcher method."""

    def _code(mock_method: AsyncMock) -> str:
        return mock_method.call_args.kwargs["token"]

    return _code
