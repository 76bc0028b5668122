"""Shared logic for flows driven by one-time codes."""

from sqlalchemy.ext.asyncio import AsyncSession

from uptask.core.logging import get_logger
from uptask.infrastructure.persistence.models import TokenModel, UserModel
from uptask.infrastructure.persistence.repositories import TokenRepository, UserRepository
from uptask.infrastructure.services.token_service import token_service

logger = get_logger(__name__)


class TokenFlowService:
    """Issues codes for users and resolves codes back to users."""

    def __init__(
        self,
        session: AsyncSession,
        user_repo: UserRepository,
        token_repo: TokenRepository,
        expire_minutes: int | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            session: SQLAlchemy async session.
            user_repo: Repository for user operations.
            token_repo: Repository for token operations.
            expire_minutes: Reject codes older than this. None accepts any
                stored code.
        """
        self.session = session
        self.user_repo = user_repo
        self.token_repo = token_repo
        self.expire_minutes = expire_minutes

    async def issue_token(self, user: UserModel) -> TokenModel:
        """Create a new code for a user and commit it.

        Pending changes on the session (e.g. a freshly added user) are
        committed in the same transaction.
        """
        token = await self.token_repo.create(user.id, token_service.generate_code())
        await self.session.commit()
        logger.info("Token issued", user_id=user.id, token_id=token.id)
        return token

    async def get_valid_token(self, code: str) -> TokenModel | None:
        """Look up a stored code, applying expiry when it is enforced."""
        token = await self.token_repo.get_by_token(code)
        if token is None:
            return None
        if self.expire_minutes is not None and token.is_expired(self.expire_minutes):
            logger.info("Token rejected: expired", token_id=token.id, user_id=token.user_id)
            return None
        return token
