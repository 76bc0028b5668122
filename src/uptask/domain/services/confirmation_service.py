"""Service for account confirmation.

Handles issuing confirmation codes and confirming accounts with them.
"""

from uptask.core.logging import get_logger
from uptask.domain.services.token_flow_service import TokenFlowService
from uptask.infrastructure.persistence.models import UserModel

logger = get_logger(__name__)


class ConfirmationService(TokenFlowService):
    """Service for handling account confirmation business logic."""

    async def confirm(self, code: str) -> UserModel | None:
        """Confirm the account owning a code and consume the code.

        Args:
            code: The code the user typed in.

        Returns:
            The confirmed user, or None if the code is unknown or expired.
        """
        token = await self.get_valid_token(code)
        if token is None:
            logger.info("Account confirmation failed: token invalid")
            return None

        user = await self.user_repo.get_by_id(token.user_id)
        if user is None:
            logger.error("Account confirmation failed: user not found", user_id=token.user_id)
            return None

        user.confirmed = True
        await self.user_repo.update(user)
        await self.token_repo.delete(token)
        await self.session.commit()

        logger.info("Account confirmed", user_id=user.id, email=user.email)
        return user
