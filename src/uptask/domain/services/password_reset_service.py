"""Service for password reset logic.

Handles issuing reset codes, checking them, and resetting passwords.
"""

from uptask.core.logging import get_logger
from uptask.domain.services.token_flow_service import TokenFlowService
from uptask.infrastructure.auth.password_hasher import hash_password
from uptask.infrastructure.persistence.models import UserModel

logger = get_logger(__name__)


class PasswordResetService(TokenFlowService):
    """Service for handling password reset business logic."""

    async def verify_reset_token(self, code: str) -> bool:
        """Check whether a reset code is usable without consuming it."""
        is_valid = await self.get_valid_token(code) is not None
        logger.info("Token verification completed", is_valid=is_valid)
        return is_valid

    async def reset_password(self, code: str, new_password: str) -> UserModel | None:
        """Reset a user's password using a valid code.

        Args:
            code: The code sent to the user.
            new_password: The new plaintext password.

        Returns:
            The updated user, or None if the code is unknown or expired.
        """
        token = await self.get_valid_token(code)
        if token is None:
            logger.info("Password reset failed: token invalid")
            return None

        user = await self.user_repo.get_by_id(token.user_id)
        if user is None:
            logger.error("Password reset failed: user not found", user_id=token.user_id)
            return None

        user.password_hash = hash_password(new_password)
        await self.user_repo.update(user)
        await self.token_repo.delete(token)
        await self.session.commit()

        logger.info("Password reset successfully", user_id=user.id, email=user.email)
        return user
