"""Repository for confirmation and password reset codes."""

from datetime import datetime, timedelta, timezone

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from uptask.infrastructure.persistence.models import TokenModel


class TokenRepository:
    """Repository for token database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(self, user_id: str, code: str) -> TokenModel:
        """Store a new code for a user.

        Args:
            user_id: Owner of the code.
            code: The code sent by email.

        Returns:
            The stored token model.
        """
        token = TokenModel(token=code, user_id=user_id)
        self.session.add(token)
        await self.session.flush()
        return token

    async def get_by_token(self, code: str) -> TokenModel | None:
        """Look up a token by its code.

        Codes are short, so two users may hold the same one; the most
        recent row wins.
        """
        result = await self.session.execute(
            select(TokenModel)
            .where(TokenModel.token == code)
            .order_by(TokenModel.created_at.desc())
            .limit(1)
        )
        return result.scalars().first()

    async def list_for_user(self, user_id: str) -> list[TokenModel]:
        """Get every unconsumed token of a user, oldest first."""
        result = await self.session.execute(
            select(TokenModel)
            .where(TokenModel.user_id == user_id)
            .order_by(TokenModel.created_at)
        )
        return list(result.scalars().all())

    async def delete(self, token: TokenModel) -> None:
        """Delete a consumed token."""
        await self.session.delete(token)
        await self.session.flush()

    async def delete_older_than(self, minutes: int) -> int:
        """Delete tokens issued more than ``minutes`` ago.

        Returns:
            Number of tokens deleted.
        """
        cutoff = datetime.now(timezone.utc) - timedelta(minutes=minutes)
        result = await self.session.execute(
            delete(TokenModel).where(TokenModel.created_at < cutoff)
        )
        return result.rowcount
